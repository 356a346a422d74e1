"""
Database Module
Supabase persistence for tracked products, price history and comparison offers
"""

from price_worker.database.client import get_supabase_client
from price_worker.database.models import (
    ComparisonOffer,
    PriceHistoryEntry,
    ProductStatus,
    TrackedProduct,
    UserSettings,
)
from price_worker.database.repository import PriceRepository, RepositoryError

__all__ = [
    'get_supabase_client',
    'ComparisonOffer',
    'PriceHistoryEntry',
    'ProductStatus',
    'TrackedProduct',
    'UserSettings',
    'PriceRepository',
    'RepositoryError',
]
