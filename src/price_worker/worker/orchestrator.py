"""
Price-Check Orchestrator
Re-scrapes each tracked product's own page, records price changes, then
searches every comparison store for the product's currency and upserts one
comparison offer per store.

Processing is strictly sequential: one product, one store, one browser
session at a time, with fixed delays in between.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from price_worker.config import DEFAULT_CURRENCY, HISTORY_ALWAYS, HISTORY_SOURCE, WorkerSettings
from price_worker.database.models import ComparisonOffer, PriceHistoryEntry, TrackedProduct, utc_now_iso
from price_worker.database.repository import RepositoryError
from price_worker.matching.ranker import DEFAULT_WEIGHTS, ScoringWeights, select_best_match
from price_worker.matching.spec_extractor import build_search_query
from price_worker.scrapers.stores.directory import STORE_REGISTRY
from price_worker.scrapers.stores.registry import StoreRegistry
from price_worker.scrapers.stores.sites import get_site_selectors
from price_worker.utils.url_tools import currency_from_url, is_placeholder_name, name_from_url

logger = logging.getLogger(__name__)

# Scraped titles at or below this length are not trusted over the stored name
MIN_TITLE_LENGTH = 5


@dataclass
class RunSummary:
    checked: int = 0
    succeeded: int = 0
    failed: int = 0
    comparisons_matched: int = 0
    comparisons_missed: int = 0


class PriceCheckOrchestrator:
    """
    Runs one price-check cycle over all tracked products.

    Args:
        repository: PriceRepository (or compatible) for reads and writes
        fetcher: PageFetcher (or compatible) for browser scraping
        settings: Worker settings (delays, history policy, notifications)
        store_registry: Comparison stores per currency
        notifier: Optional DiscordNotifier for price drops
        weights: Result ranking weights and threshold
    """

    def __init__(self, repository, fetcher, settings: WorkerSettings,
                 store_registry: StoreRegistry = STORE_REGISTRY,
                 notifier=None, weights: ScoringWeights = DEFAULT_WEIGHTS):
        self.repository = repository
        self.fetcher = fetcher
        self.settings = settings
        self.store_registry = store_registry
        self.notifier = notifier
        self.weights = weights

    def resolve_identity(self, product: TrackedProduct) -> Tuple[str, str]:
        """
        Working name and currency for a product.

        The URL's domain overrides the stored currency (a .co.uk product is
        GBP). Placeholder names are replaced with one derived from the URL path.
        """
        name = product.name or ''
        currency = product.currency or DEFAULT_CURRENCY

        if product.url:
            currency = currency_from_url(product.url) or currency

            if is_placeholder_name(name):
                name = name_from_url(product.url) or name

        return name, currency

    def _should_record_history(self, old_price: Optional[float], new_price: float) -> bool:
        if self.settings.history_policy == HISTORY_ALWAYS:
            return True
        return old_price is None or new_price != old_price

    async def _write(self, func, *args) -> bool:
        """Run a blocking repository write off the event loop; log and swallow RepositoryError."""
        try:
            await asyncio.to_thread(func, *args)
            return True
        except RepositoryError as e:
            logger.error("Database write failed: %s", e)
            return False

    async def check_product(self, product: TrackedProduct, summary: Optional[RunSummary] = None) -> bool:
        """
        Run one check cycle for a product.

        Returns:
            True if the product's own price was scraped, False if it failed
            (status set to 'scrape_failed', comparisons skipped)
        """
        summary = summary if summary is not None else RunSummary()
        summary.checked += 1

        name, currency = self.resolve_identity(product)

        logger.info("Processing: %s", name[:50])
        logger.info("  URL: %s", product.url)
        logger.info("  Currency: %s", currency)

        selectors = get_site_selectors(product.url)
        result = await self.fetcher.fetch_product_page(
            product.url, selectors.price_selector, selectors.wait_selector
        )

        if result is None:
            logger.warning("  Could not scrape main product price for %s, skipping comparisons", product.id)
            await self._write(self.repository.mark_scrape_failed, product.id)
            summary.failed += 1
            return False

        old_price = product.current_price
        new_price = result.price

        final_name = result.title if len(result.title) > MIN_TITLE_LENGTH else name

        await self._write(self.repository.update_product_price, product.id, final_name, currency, new_price)
        logger.info("  Price: %s %s", currency, new_price)

        if self._should_record_history(old_price, new_price):
            entry = PriceHistoryEntry(
                product_id=product.id,
                price=new_price,
                currency=currency,
                source=HISTORY_SOURCE,
            )
            await self._write(self.repository.insert_price_history, entry)

        if old_price and new_price < old_price:
            logger.info("  PRICE DROP: %s -> %s", old_price, new_price)
            await self._notify_price_drop(product, final_name, currency, old_price, new_price)
        elif old_price and new_price > old_price:
            logger.info("  Price increased: %s -> %s", old_price, new_price)

        summary.succeeded += 1

        matched, missed = await self.scrape_comparison_prices(product.id, final_name, currency, new_price)
        summary.comparisons_matched += matched
        summary.comparisons_missed += missed
        return True

    async def _notify_price_drop(self, product: TrackedProduct, name: str, currency: str,
                                 old_price: float, new_price: float) -> None:
        if not self.notifier or not self.settings.notifications_enabled or not product.user_id:
            return

        try:
            user_settings = await asyncio.to_thread(self.repository.get_user_settings, product.user_id)
        except RepositoryError as e:
            logger.warning("  Could not load notification settings: %s", e)
            return

        if not user_settings or not user_settings.discord_webhook:
            return

        notified = TrackedProduct(
            id=product.id,
            user_id=product.user_id,
            name=name,
            url=product.url,
            current_price=new_price,
            currency=currency,
            image_url=product.image_url,
        )
        await asyncio.to_thread(
            self.notifier.send_price_drop, user_settings.discord_webhook, notified, old_price, new_price
        )

    async def scrape_comparison_prices(self, product_id: str, product_name: str, currency: str,
                                       reference_price: Optional[float] = None) -> Tuple[int, int]:
        """
        Search every store for the currency and upsert one comparison row per store.

        A confident match stores its price (is_available=True); no match stores
        price=None, is_available=False and keeps the search link.

        Returns:
            Tuple of (matched store count, unmatched store count)
        """
        query = build_search_query(product_name)
        stores = self.store_registry.get_stores_for_currency(currency)

        logger.info("Searching comparison prices for: \"%s\" (%s)", query, currency)
        if reference_price:
            logger.info("  Reference price: %s %s", currency, reference_price)

        matched = 0
        missed = 0

        for index, store in enumerate(stores):
            try:
                search_url = store.search_url(query)
                logger.info("  -> Checking %s...", store.name)

                candidates = await self.fetcher.fetch_search_results(
                    search_url,
                    store.price_selector,
                    store.title_selector,
                    store.result_selector,
                    self.settings.max_results,
                )
                match = select_best_match(
                    candidates, product_name, reference_price, currency, self.weights
                )

                if match:
                    logger.info("    Match found: %s %s", match.currency, match.price)
                    offer = ComparisonOffer(
                        product_id=product_id,
                        store_name=store.name,
                        store_url=search_url,
                        price=match.price,
                        currency=match.currency,
                        is_available=True,
                        last_checked=utc_now_iso(),
                    )
                    matched += 1
                else:
                    logger.info("    No matching product found")
                    offer = ComparisonOffer(
                        product_id=product_id,
                        store_name=store.name,
                        store_url=search_url,
                        price=None,
                        currency=currency,
                        is_available=False,
                        last_checked=utc_now_iso(),
                    )
                    missed += 1

                await self._write(self.repository.upsert_comparison, offer)

            except Exception:
                logger.exception("    Error scraping %s", store.name)

            if index < len(stores) - 1:
                await asyncio.sleep(self.settings.store_delay_seconds)

        return matched, missed

    async def run(self) -> RunSummary:
        """Check every product with a URL, one at a time."""
        summary = RunSummary()

        logger.info("PricePulse Worker Start")

        try:
            products = await asyncio.to_thread(self.repository.fetch_products_with_url)
        except RepositoryError as e:
            logger.error("Failed to fetch products: %s", e)
            return summary

        products = [p for p in products if p.url]
        logger.info("Found %d products to check", len(products))

        for i, product in enumerate(products, 1):
            logger.info("[%d/%d]", i, len(products))
            await self.check_product(product, summary)

            if i < len(products):
                await asyncio.sleep(self.settings.product_delay_seconds)

        logger.info(
            "PricePulse Worker Complete: %d checked, %d succeeded, %d failed, %d comparison matches",
            summary.checked, summary.succeeded, summary.failed, summary.comparisons_matched,
        )
        return summary

    def __repr__(self) -> str:
        return f"PriceCheckOrchestrator({self.store_registry!r})"
