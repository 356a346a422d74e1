"""
Page Fetcher
Drives one headless-browser page load per call and extracts either a product
page's own price and title, or candidate rows from a search results page.

Every call opens an isolated browser session and closes it on every exit path.
Scrape failures are expected and never raised: callers get None or [].
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright
from playwright_stealth import Stealth

from price_worker.config import WorkerSettings
from price_worker.matching.price_parser import parse_price

logger = logging.getLogger(__name__)

# Constants
SCREEN_WIDTH = 1920
SCREEN_HEIGHT = 1080
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
]

MAX_TITLE_LENGTH = 100
MAX_RESULT_TITLE_LENGTH = 150

# Title fallbacks for a product's own page (site hint is tried first)
PRODUCT_TITLE_SELECTORS = [
    '#productTitle',                   # Amazon
    '[data-test="product-title"]',     # Argos, Target
    '[data-testid="product-title"]',   # Walmart
    '[data-testid="x-item-title"]',    # eBay
    '.product-name h1',
    '.product-title',
    'h1',
]

# Title fallbacks inside one search result (store selector is tried first)
RESULT_TITLE_SELECTORS = [
    'h2',
    'h3',
    '[data-testid="product-title"]',
    '[data-test="product-title"]',
    '.s-item__title',
    '.product-title',
    'a[href*="/"]',
]

EXTRACT_PRODUCT_PAGE_JS = '''
    ({ priceSelector, titleSelectors, maxTitle }) => {
        const clean = (text) => (text || '').replace(/\\s+/g, ' ').trim();

        let title = '';
        for (const sel of titleSelectors) {
            let el = null;
            try { el = document.querySelector(sel); } catch (e) { continue; }
            const text = clean(el && el.textContent);
            if (text) {
                title = text.substring(0, maxTitle).trim();
                break;
            }
        }

        // Meta tags carry the price in their content attribute
        let priceTexts = [];
        try {
            priceTexts = Array.from(document.querySelectorAll(priceSelector))
                .map(el => clean(el.getAttribute('content') || el.textContent))
                .filter(text => text);
        } catch (e) {}

        return { title, priceTexts: priceTexts.slice(0, 50) };
    }
'''

EXTRACT_SEARCH_RESULTS_JS = '''
    ({ resultSelector, priceSelector, titleSelectors, maxResults, maxTitle }) => {
        const clean = (text) => (text || '').replace(/\\s+/g, ' ').trim();

        let containers = [];
        try {
            containers = Array.from(document.querySelectorAll(resultSelector)).slice(0, maxResults);
        } catch (e) {
            return [];
        }

        return containers.map((container, position) => {
            let title = '';
            for (const sel of titleSelectors) {
                let el = null;
                try { el = container.querySelector(sel); } catch (e) { continue; }
                const text = clean(el && el.textContent);
                if (text) {
                    title = text.substring(0, maxTitle).trim();
                    break;
                }
            }

            let priceTexts = [];
            try {
                priceTexts = Array.from(container.querySelectorAll(priceSelector))
                    .map(el => clean(el.textContent))
                    .filter(text => text);
            } catch (e) {}

            return { position, title, priceTexts: priceTexts.slice(0, 10) };
        });
    }
'''


@dataclass(frozen=True)
class PageScrape:
    price: float
    title: str = ''


@dataclass(frozen=True)
class SearchCandidate:
    title: str
    price: float
    position: int


def first_valid_price(price_texts) -> Optional[float]:
    """First text in DOM order that normalizes to a plausible price."""
    for text in price_texts or []:
        price = parse_price(text)
        if price is not None:
            return price
    return None


@asynccontextmanager
async def browser_session(settings: WorkerSettings):
    """
    Open an isolated stealth Chromium session and yield a fresh page.

    The browser and Playwright driver are released on every exit path,
    including errors and cancellation.
    """
    async with Stealth().use_async(async_playwright()) as p:
        browser = await p.chromium.launch(headless=settings.headless, args=BROWSER_ARGS)
        try:
            context = await browser.new_context(
                viewport={"width": SCREEN_WIDTH, "height": SCREEN_HEIGHT},
                user_agent=USER_AGENT,
            )
            page = await context.new_page()
            yield page
        finally:
            await browser.close()


class PageFetcher:
    """
    Fetches product and search pages, one browser session per call.

    Args:
        settings: Worker settings (timeouts, headless flag, deadline)
        session_factory: Callable returning an async context manager that
            yields a Playwright page (defaults to ``browser_session``)
    """

    def __init__(self, settings: WorkerSettings, session_factory=browser_session):
        self.settings = settings
        self.session_factory = session_factory

    async def _load(self, page, url: str, wait_selector: Optional[str]) -> None:
        """Navigate, wait (best effort) for the hint selector, then let JS rendering settle."""
        await page.goto(url, wait_until="networkidle", timeout=self.settings.navigation_timeout_ms)

        if wait_selector:
            try:
                await page.wait_for_selector(wait_selector, timeout=self.settings.wait_selector_timeout_ms)
            except PlaywrightTimeoutError:
                logger.debug("Wait selector %s never appeared on %s, continuing", wait_selector, url)

        await page.wait_for_timeout(self.settings.settle_delay_ms)

    async def _scrape_product_page(self, url: str, price_selector: str,
                                   wait_selector: Optional[str]) -> Optional[PageScrape]:
        async with self.session_factory(self.settings) as page:
            await self._load(page, url, wait_selector)

            title_selectors = ([wait_selector] if wait_selector else []) + PRODUCT_TITLE_SELECTORS
            data = await page.evaluate(EXTRACT_PRODUCT_PAGE_JS, {
                'priceSelector': price_selector,
                'titleSelectors': title_selectors,
                'maxTitle': MAX_TITLE_LENGTH,
            })

        data = data or {}
        price = first_valid_price(data.get('priceTexts'))
        if price is None:
            logger.info("No valid price found on %s", url)
            return None

        return PageScrape(price=price, title=data.get('title') or '')

    async def _scrape_search_page(self, url: str, price_selector: str, title_selector: str,
                                  result_selector: str, max_results: int) -> List[SearchCandidate]:
        async with self.session_factory(self.settings) as page:
            await self._load(page, url, result_selector)

            title_selectors = ([title_selector] if title_selector else []) + RESULT_TITLE_SELECTORS
            rows = await page.evaluate(EXTRACT_SEARCH_RESULTS_JS, {
                'resultSelector': result_selector,
                'priceSelector': price_selector,
                'titleSelectors': title_selectors,
                'maxResults': max_results,
                'maxTitle': MAX_RESULT_TITLE_LENGTH,
            })

        candidates = []
        for row in rows or []:
            title = (row.get('title') or '').strip()
            price = first_valid_price(row.get('priceTexts'))
            if title and price is not None:
                candidates.append(SearchCandidate(title=title, price=price, position=row.get('position', 0)))

        return candidates

    async def fetch_product_page(self, url: str, price_selector: str,
                                 wait_selector: Optional[str] = None) -> Optional[PageScrape]:
        """
        Scrape a product's own page for its price and title.

        Args:
            url: Product page URL
            price_selector: Comma-joined price selectors, evaluated in DOM order
            wait_selector: Optional selector to wait for; also the first title selector

        Returns:
            PageScrape, or None on any failure or when no valid price is found
        """
        try:
            return await asyncio.wait_for(
                self._scrape_product_page(url, price_selector, wait_selector),
                timeout=self.settings.fetch_deadline_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("Product page scrape exceeded %.0fs deadline: %s",
                           self.settings.fetch_deadline_seconds, url)
        except PlaywrightError as e:
            logger.warning("Product page scrape failed for %s: %s", url, str(e)[:200])
        except Exception as e:
            logger.warning("Unexpected error scraping %s: %s", url, str(e)[:200])
        return None

    async def fetch_search_results(self, url: str, price_selector: str, title_selector: str,
                                   result_selector: str,
                                   max_results: Optional[int] = None) -> List[SearchCandidate]:
        """
        Scrape up to ``max_results`` candidate rows from a search results page.

        Only containers with both a title and a valid price are kept.

        Returns:
            Unsorted list of SearchCandidate (empty on any failure)
        """
        limit = max_results if max_results is not None else self.settings.max_results
        try:
            return await asyncio.wait_for(
                self._scrape_search_page(url, price_selector, title_selector, result_selector, limit),
                timeout=self.settings.fetch_deadline_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("Search scrape exceeded %.0fs deadline: %s",
                           self.settings.fetch_deadline_seconds, url)
        except PlaywrightError as e:
            logger.warning("Search scrape failed for %s: %s", url, str(e)[:200])
        except Exception as e:
            logger.warning("Unexpected error scraping %s: %s", url, str(e)[:200])
        return []
