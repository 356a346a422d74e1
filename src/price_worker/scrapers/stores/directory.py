"""
Store Directory
Comparison storefronts for each supported currency.

Built once at import; add a store by adding a row to STORE_TABLE.
"""

from typing import Dict, Optional, Tuple

from price_worker.scrapers.stores.base import StoreConfig
from price_worker.scrapers.stores.registry import StoreRegistry

# Shared selectors for Amazon search result pages (all locales)
_AMAZON_PRICE = '.a-price .a-offscreen, .a-price-whole'
_AMAZON_TITLE = 'h2 a span, h2 span'
_AMAZON_RESULT = '[data-component-type="s-search-result"]'

# Shared selectors for eBay search result pages
_EBAY_PRICE = '.s-item__price'
_EBAY_TITLE = '.s-item__title'
_EBAY_RESULT = '.s-item'

STORE_TABLE: Dict[str, Tuple[StoreConfig, ...]] = {
    'USD': (
        StoreConfig('Amazon', 'https://www.amazon.com/s?k={query}',
                    _AMAZON_PRICE, _AMAZON_TITLE, _AMAZON_RESULT),
        StoreConfig('eBay', 'https://www.ebay.com/sch/i.html?_nkw={query}',
                    _EBAY_PRICE, _EBAY_TITLE, _EBAY_RESULT),
        StoreConfig('Walmart', 'https://www.walmart.com/search?q={query}',
                    '[data-automation-id="product-price"] span',
                    '[data-automation-id="product-title"]',
                    '[data-item-id]'),
        StoreConfig('Target', 'https://www.target.com/s?searchTerm={query}',
                    '[data-test="current-price"]',
                    '[data-test="product-title"]',
                    '[data-test="product-card"]'),
        StoreConfig('Best Buy', 'https://www.bestbuy.com/site/searchpage.jsp?st={query}',
                    '.priceView-customer-price span', '.sku-title', '.sku-item'),
    ),
    'GBP': (
        StoreConfig('Amazon', 'https://www.amazon.co.uk/s?k={query}',
                    '.a-price .a-offscreen, .a-price-whole, span.a-price',
                    _AMAZON_TITLE, _AMAZON_RESULT),
        StoreConfig('eBay', 'https://www.ebay.co.uk/sch/i.html?_nkw={query}',
                    '.s-item__price, .s-card__price, .x-price-primary span',
                    _EBAY_TITLE, '.s-item, .s-card'),
        StoreConfig('Argos', 'https://www.argos.co.uk/search/{query}/',
                    '[data-test="component-product-card-price"], .ProductCardstyles__Price',
                    '[data-test="component-product-card-title"]',
                    '[data-test="component-product-card"]'),
        StoreConfig('John Lewis', 'https://www.johnlewis.com/search?search-term={query}',
                    '.price, [class*="price"]',
                    '[data-testid="product-title"]',
                    '[data-testid="product-card"]'),
        StoreConfig('PriceRunner', 'https://www.pricerunner.com/results?q={query}',
                    'a[href*="/pl/"] span', 'a[href*="/pl/"]', 'a[href*="/pl/"]'),
    ),
    'EUR': (
        StoreConfig('Amazon', 'https://www.amazon.de/s?k={query}',
                    _AMAZON_PRICE, _AMAZON_TITLE, _AMAZON_RESULT),
        StoreConfig('eBay', 'https://www.ebay.de/sch/i.html?_nkw={query}',
                    _EBAY_PRICE, _EBAY_TITLE, _EBAY_RESULT),
        StoreConfig('Idealo', 'https://www.idealo.de/preisvergleich/MainSearchProductCategory.html?q={query}',
                    '[data-testid="price"]', '[data-testid="product-title"]',
                    '[data-testid="product-item"]'),
        StoreConfig('MediaMarkt', 'https://www.mediamarkt.de/de/search.html?query={query}',
                    '[data-test="price"]', '[data-test="product-name"]',
                    '[data-test="product-tile"]'),
    ),
    'CAD': (
        StoreConfig('Amazon', 'https://www.amazon.ca/s?k={query}',
                    _AMAZON_PRICE, _AMAZON_TITLE, _AMAZON_RESULT),
        StoreConfig('eBay', 'https://www.ebay.ca/sch/i.html?_nkw={query}',
                    _EBAY_PRICE, _EBAY_TITLE, _EBAY_RESULT),
        StoreConfig('Best Buy CA', 'https://www.bestbuy.ca/en-ca/search?search={query}',
                    '[data-automation="product-price"]',
                    '[data-automation="product-title"]',
                    '[data-automation="product-item"]'),
        StoreConfig('Walmart CA', 'https://www.walmart.ca/search?q={query}',
                    '[data-automation="product-price"]',
                    '[data-automation="product-title"]',
                    '[data-automation="product-item"]'),
    ),
    'AUD': (
        StoreConfig('Amazon', 'https://www.amazon.com.au/s?k={query}',
                    _AMAZON_PRICE, _AMAZON_TITLE, _AMAZON_RESULT),
        StoreConfig('eBay', 'https://www.ebay.com.au/sch/i.html?_nkw={query}',
                    _EBAY_PRICE, _EBAY_TITLE, _EBAY_RESULT),
        StoreConfig('Kogan', 'https://www.kogan.com/au/search/?q={query}',
                    '[data-testid="price"]', '[data-testid="product-title"]',
                    '[data-testid="product-card"]'),
        StoreConfig('JB Hi-Fi', 'https://www.jbhifi.com.au/search?q={query}',
                    '.price', '.product-title', '.product-tile'),
    ),
}


def build_store_registry() -> StoreRegistry:
    registry = StoreRegistry()
    for currency, stores in STORE_TABLE.items():
        for store in stores:
            registry.register(currency, store)
    return registry.freeze()


STORE_REGISTRY = build_store_registry()


def get_stores_for_currency(currency: Optional[str]) -> Tuple[StoreConfig, ...]:
    """Stores to search for a currency; unknown currencies get the USD stores."""
    return STORE_REGISTRY.get_stores_for_currency(currency)
