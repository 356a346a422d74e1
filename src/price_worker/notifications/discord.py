"""
Discord Price-Drop Notifications
Posts a Discord embed to a user's webhook when a tracked product gets cheaper
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

import requests

from price_worker.database.models import TrackedProduct

logger = logging.getLogger(__name__)

EMBED_COLOR = 0xFF9EB5
FOOTER_TEXT = 'PricePulse. Tracking your deals.'
REQUEST_TIMEOUT = 10


def build_price_drop_embed(product: TrackedProduct, old_price: float, new_price: float) -> Dict:
    """
    Build the webhook payload for a price drop.

    Example savings field: "USD 50.00 (14.4%)"
    """
    diff = old_price - new_price
    percent = (diff / old_price) * 100 if old_price else 0.0
    currency = product.currency

    return {
        'embeds': [{
            'title': '🚨 Price Drop Alert!',
            'description': f"**{product.name}** just dropped in price!",
            'url': product.url,
            'color': EMBED_COLOR,
            'fields': [
                {'name': 'Old Price', 'value': f"{currency} {old_price:.2f}", 'inline': True},
                {'name': 'New Price', 'value': f"{currency} {new_price:.2f}", 'inline': True},
                {'name': 'Savings', 'value': f"{currency} {diff:.2f} ({percent:.1f}%)", 'inline': False},
            ],
            'thumbnail': {'url': product.image_url or ''},
            'footer': {'text': FOOTER_TEXT},
            'timestamp': datetime.now(timezone.utc).isoformat(),
        }]
    }


class DiscordNotifier:
    """Fire-and-log webhook sender; failures never propagate."""

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> 'DiscordNotifier':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def send_price_drop(self, webhook_url: str, product: TrackedProduct,
                        old_price: float, new_price: float) -> bool:
        """
        Send a price-drop embed.

        Returns:
            True if Discord accepted the message, False otherwise
        """
        payload = build_price_drop_embed(product, old_price, new_price)

        try:
            response = self.session.post(webhook_url, json=payload, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            logger.warning("Failed to send Discord notification for %s: %s", product.id, e)
            return False

        if not response.ok:
            logger.warning("Discord webhook returned %s for %s", response.status_code, product.id)
            return False

        logger.info("Sent price drop notification for %s", product.id)
        return True
