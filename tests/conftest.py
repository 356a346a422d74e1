"""Shared fakes for price worker tests (no browser, no network, no database)."""

from typing import Dict, List, Optional

import pytest

from price_worker.config import WorkerSettings
from price_worker.database.models import TrackedProduct, UserSettings
from price_worker.database.repository import RepositoryError
from price_worker.scrapers.page_fetcher import PageScrape, SearchCandidate


class FakeRepository:
    """In-memory stand-in for PriceRepository that records every write."""

    def __init__(self, products: Optional[List[TrackedProduct]] = None,
                 user_settings: Optional[Dict[str, UserSettings]] = None,
                 fail_upserts_for: Optional[set] = None):
        self.products = products or []
        self.user_settings = user_settings or {}
        self.fail_upserts_for = fail_upserts_for or set()
        self.price_updates = []
        self.failed_ids = []
        self.history = []
        self.comparisons = {}
        self.upsert_calls = []

    def fetch_products_with_url(self):
        return list(self.products)

    def update_product_price(self, product_id, name, currency, price):
        self.price_updates.append({
            'id': product_id, 'name': name, 'currency': currency,
            'current_price': price, 'status': 'tracking',
        })

    def mark_scrape_failed(self, product_id):
        self.failed_ids.append(product_id)

    def insert_price_history(self, entry):
        self.history.append(entry)

    def upsert_comparison(self, offer):
        self.upsert_calls.append(offer)
        if offer.store_name in self.fail_upserts_for:
            raise RepositoryError(f"upsert rejected for {offer.store_name}")
        self.comparisons[(offer.product_id, offer.store_name)] = offer

    def get_user_settings(self, user_id):
        return self.user_settings.get(user_id)


class FakeFetcher:
    """Returns canned scrape results and records the URLs requested."""

    def __init__(self, product_page: Optional[PageScrape] = None,
                 search_results: Optional[List[SearchCandidate]] = None,
                 search_results_by_store: Optional[Dict[str, List[SearchCandidate]]] = None):
        self.product_page = product_page
        self.search_results = search_results or []
        self.search_results_by_store = search_results_by_store or {}
        self.product_calls = []
        self.search_calls = []

    async def fetch_product_page(self, url, price_selector, wait_selector=None):
        self.product_calls.append((url, price_selector, wait_selector))
        return self.product_page

    async def fetch_search_results(self, url, price_selector, title_selector,
                                   result_selector, max_results=None):
        self.search_calls.append(url)
        for host, results in self.search_results_by_store.items():
            if host in url:
                return list(results)
        return list(self.search_results)


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def send_price_drop(self, webhook_url, product, old_price, new_price):
        self.sent.append((webhook_url, product, old_price, new_price))
        return True


@pytest.fixture
def settings():
    return WorkerSettings(
        supabase_url='https://example.supabase.co',
        supabase_key='service-role-key',
        store_delay_seconds=0,
        product_delay_seconds=0,
        settle_delay_ms=0,
    )


@pytest.fixture
def sony_product():
    return TrackedProduct(
        id='prod-1',
        user_id='user-1',
        name=SONY_TARGET,
        url='https://www.amazon.com/Sony-WH-1000XM5-Headphones/dp/B09XS7JWHH',
        current_price=348.00,
        currency='USD',
        status='tracking',
    )


SONY_TARGET = 'Sony WH-1000XM5 Headphones'

IRRELEVANT_TITLES = [
    "Apple AirPods Pro (2nd Generation)",
    "Bose QuietComfort Ultra Earbuds",
    "Anker Soundcore Life Q30 Hybrid",
    "JBL Tune 510BT Wireless On-Ear",
    "Headphone Stand Aluminium Holder",
    "Beats Studio Pro Wireless",
    "Replacement Ear Pads Cushions",
    "Skullcandy Hesh ANC Wireless",
    "Audio-Technica ATH-M50x Studio Monitor",
]


def sony_search_page(match_position=6):
    """Ten search rows: nine unrelated listings and the Sony headphones at ``match_position``."""
    candidates = []
    irrelevant = iter(IRRELEVANT_TITLES)
    for position in range(10):
        if position == match_position:
            candidates.append(SearchCandidate(
                title="Sony WH-1000XM5 Wireless Headphones Black", price=310.0, position=position,
            ))
        else:
            candidates.append(SearchCandidate(title=next(irrelevant), price=249.0, position=position))
    return candidates
