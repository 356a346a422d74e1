"""
Price Repository
Reads tracked products and writes price updates, history rows and
comparison offers through the Supabase client
"""

import logging
from typing import Dict, List, Optional

from supabase import Client

from price_worker.database.models import (
    ComparisonOffer,
    PriceHistoryEntry,
    ProductStatus,
    TrackedProduct,
    UserSettings,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

COMPARISON_CONFLICT_KEY = 'product_id,store_name'


class RepositoryError(Exception):
    """A read or write against the persisted store failed."""


class PriceRepository:
    """
    Supabase-backed persistence for the price worker.

    Every method raises RepositoryError on failure; callers decide whether
    the failure is fatal.
    """

    def __init__(self, client: Client):
        self.client = client

    def fetch_products_with_url(self) -> List[TrackedProduct]:
        """All products (across all users) with a non-null source URL."""
        try:
            result = self.client.table('products').select('*').not_.is_('url', 'null').execute()
        except Exception as e:
            raise RepositoryError(f"Failed to fetch products: {e}") from e

        return [TrackedProduct.from_row(row) for row in result.data or []]

    def update_product_price(self, product_id: str, name: str, currency: str, price: float) -> None:
        """Record a successful scrape: new name, currency and price, status 'tracking'."""
        self._update_product(product_id, {
            'name': name,
            'currency': currency,
            'current_price': price,
            'last_checked': utc_now_iso(),
            'status': ProductStatus.TRACKING.value,
        })

    def mark_scrape_failed(self, product_id: str) -> None:
        self._update_product(product_id, {'status': ProductStatus.SCRAPE_FAILED.value})

    def _update_product(self, product_id: str, changes: Dict) -> None:
        try:
            self.client.table('products').update(changes).eq('id', product_id).execute()
        except Exception as e:
            raise RepositoryError(f"Failed to update product {product_id}: {e}") from e

    def insert_price_history(self, entry: PriceHistoryEntry) -> None:
        try:
            self.client.table('price_history').insert(entry.to_row()).execute()
        except Exception as e:
            raise RepositoryError(f"Failed to insert price history for {entry.product_id}: {e}") from e

    def upsert_comparison(self, offer: ComparisonOffer) -> None:
        """Insert or replace the single comparison row for (product, store)."""
        try:
            self.client.table('comparison_prices').upsert(
                offer.to_row(), on_conflict=COMPARISON_CONFLICT_KEY
            ).execute()
        except Exception as e:
            raise RepositoryError(
                f"Failed to upsert comparison {offer.store_name} for {offer.product_id}: {e}"
            ) from e

    def get_user_settings(self, user_id: str) -> Optional[UserSettings]:
        try:
            result = self.client.table('user_settings').select('*').eq('id', user_id).limit(1).execute()
        except Exception as e:
            raise RepositoryError(f"Failed to fetch settings for user {user_id}: {e}") from e

        if not result.data:
            return None
        return UserSettings.from_row(result.data[0])
