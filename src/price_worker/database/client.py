"""
Supabase Client
Creates the privileged Supabase client used by the worker
"""

from supabase import Client, create_client

from price_worker.config import WorkerSettings


def get_supabase_client(settings: WorkerSettings) -> Client:
    """
    Create a Supabase client from worker settings.

    Raises:
        ConfigurationError: If SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is missing
    """
    settings.require_credentials()
    return create_client(settings.supabase_url, settings.supabase_key)
