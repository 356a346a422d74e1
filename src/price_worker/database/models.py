"""
Database Models
Row shapes for the products, price_history, comparison_prices and
user_settings tables
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from price_worker.config import DEFAULT_CURRENCY, HISTORY_SOURCE


class ProductStatus(str, Enum):
    QUEUED = 'queued'
    SCRAPING = 'scraping'
    TRACKING = 'tracking'
    SCRAPE_FAILED = 'scrape_failed'


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_float(value) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass
class TrackedProduct:
    id: str
    user_id: str
    name: str
    url: Optional[str] = None
    current_price: Optional[float] = None
    currency: str = DEFAULT_CURRENCY
    status: str = ProductStatus.QUEUED.value
    image_url: Optional[str] = None
    created_at: Optional[str] = None
    last_checked: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'TrackedProduct':
        """Build from a Supabase ``products`` row, tolerating missing optional columns."""
        return cls(
            id=str(row['id']),
            user_id=str(row.get('user_id') or ''),
            name=row.get('name') or '',
            url=row.get('url'),
            current_price=_to_float(row.get('current_price')),
            currency=row.get('currency') or DEFAULT_CURRENCY,
            status=row.get('status') or ProductStatus.QUEUED.value,
            image_url=row.get('image_url'),
            created_at=row.get('created_at'),
            last_checked=row.get('last_checked'),
        )


@dataclass
class PriceHistoryEntry:
    product_id: str
    price: float
    currency: str
    source: str = HISTORY_SOURCE
    recorded_at: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        row = {
            'product_id': self.product_id,
            'price': self.price,
            'currency': self.currency,
            'source': self.source,
        }
        # Database default applies when unset
        if self.recorded_at:
            row['recorded_at'] = self.recorded_at
        return row


@dataclass
class ComparisonOffer:
    """One row per (product, store); upserted every cycle, never appended."""
    product_id: str
    store_name: str
    store_url: str
    price: Optional[float]
    currency: Optional[str]
    is_available: bool
    last_checked: str

    def to_row(self) -> Dict[str, Any]:
        return {
            'product_id': self.product_id,
            'store_name': self.store_name,
            'store_url': self.store_url,
            'price': self.price,
            'currency': self.currency,
            'is_available': self.is_available,
            'last_checked': self.last_checked,
        }


@dataclass
class UserSettings:
    id: str
    discord_webhook: Optional[str] = None
    check_frequency: Optional[str] = None
    default_currency: str = DEFAULT_CURRENCY
    username: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'UserSettings':
        return cls(
            id=str(row['id']),
            discord_webhook=row.get('discord_webhook') or None,
            check_frequency=row.get('check_frequency'),
            default_currency=row.get('default_currency') or DEFAULT_CURRENCY,
            username=row.get('username'),
            avatar_url=row.get('avatar_url'),
        )
