"""
Worker Configuration
Reads environment variables (and .env / .env.local) to configure the price worker
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from the project root (.env first, .env.local second)
PROJECT_ROOT = Path(__file__).resolve().parents[2]
for env_name in ('.env', '.env.local'):
    env_path = PROJECT_ROOT / env_name
    if env_path.exists():
        load_dotenv(env_path)

# History policies
HISTORY_ON_CHANGE = 'on_change'
HISTORY_ALWAYS = 'always'
HISTORY_POLICIES = (HISTORY_ON_CHANGE, HISTORY_ALWAYS)

# Source tag stamped on automated price history rows
HISTORY_SOURCE = 'price_worker_automation'

DEFAULT_CURRENCY = 'USD'


class ConfigurationError(Exception):
    """Raised when required worker configuration is missing."""


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    if value is None or value.strip() == '':
        return default
    return value.strip()


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in ('1', 'true', 'yes', 'on')


def _parse_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


def _parse_float(value: Optional[str], default: float) -> float:
    try:
        return float(value) if value is not None else default
    except ValueError:
        return default


@dataclass(frozen=True)
class WorkerSettings:
    """
    Immutable worker settings, loaded once at startup.

    Timeouts for the browser are in milliseconds (Playwright's unit),
    delays and the per-fetch deadline are in seconds.
    """
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    headless: bool = True
    navigation_timeout_ms: int = 30000
    wait_selector_timeout_ms: int = 10000
    settle_delay_ms: int = 2000
    fetch_deadline_seconds: float = 90.0

    max_results: int = 10
    store_delay_seconds: float = 3.0
    product_delay_seconds: float = 5.0

    history_policy: str = HISTORY_ON_CHANGE
    notifications_enabled: bool = True

    @classmethod
    def from_env(cls) -> 'WorkerSettings':
        """Build settings from the process environment, falling back to defaults on bad values."""
        defaults = cls()

        history_policy = (_get_env('PRICE_WORKER_HISTORY_POLICY', HISTORY_ON_CHANGE) or '').lower()
        if history_policy not in HISTORY_POLICIES:
            history_policy = HISTORY_ON_CHANGE

        return cls(
            supabase_url=_get_env('SUPABASE_URL'),
            supabase_key=_get_env('SUPABASE_SERVICE_ROLE_KEY'),
            headless=_parse_bool(_get_env('PRICE_WORKER_HEADLESS'), defaults.headless),
            fetch_deadline_seconds=_parse_float(
                _get_env('PRICE_WORKER_FETCH_DEADLINE'), defaults.fetch_deadline_seconds
            ),
            max_results=_parse_int(_get_env('PRICE_WORKER_MAX_RESULTS'), defaults.max_results),
            store_delay_seconds=_parse_float(
                _get_env('PRICE_WORKER_STORE_DELAY'), defaults.store_delay_seconds
            ),
            product_delay_seconds=_parse_float(
                _get_env('PRICE_WORKER_PRODUCT_DELAY'), defaults.product_delay_seconds
            ),
            history_policy=history_policy,
            notifications_enabled=_parse_bool(
                _get_env('PRICE_WORKER_NOTIFY'), defaults.notifications_enabled
            ),
        )

    def require_credentials(self) -> None:
        """
        Ensure the Supabase endpoint and service-role key are present.

        Raises:
            ConfigurationError: If either value is missing
        """
        missing = [
            name for name, value in (
                ('SUPABASE_URL', self.supabase_url),
                ('SUPABASE_SERVICE_ROLE_KEY', self.supabase_key),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing Supabase credentials: {', '.join(missing)}")


# Log level: DEBUG, INFO, WARNING, ERROR
LOG_LEVEL: str = _get_env('LOG_LEVEL', 'INFO')
