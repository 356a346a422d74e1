"""
Retailer Product-Page Selectors
Maps a product URL's hostname to the selector set used to scrape its own page
"""

from typing import Dict, Optional
from urllib.parse import urlparse

from price_worker.scrapers.stores.base import SiteSelectors

GENERIC_SITE = 'generic'

# Sites operating under many country domains, matched by hostname label
# (amazon.com, amazon.co.uk, amazon.de, ...)
SITE_LABELS: Dict[str, str] = {
    'amazon': 'amazon',
    'ebay': 'ebay',
    'walmart': 'walmart',
    'bestbuy': 'bestbuy',
    'pricerunner': 'pricerunner',
}

# Sites matched by their registrable domain
SITE_DOMAINS: Dict[str, str] = {
    'target': 'target.com',
    'argos': 'argos.co.uk',
    'johnlewis': 'johnlewis.com',
}

SITE_SELECTORS: Dict[str, SiteSelectors] = {
    'amazon': SiteSelectors(
        site='amazon',
        price_selectors=(
            '.a-price .a-offscreen',
            '#corePrice_feature_div .a-offscreen',
            '#corePriceDisplay_desktop_feature_div .a-offscreen',
            '.a-price-whole',
            '#priceblock_ourprice',
            '#priceblock_dealprice',
            '#price_inside_buybox',
            'span.a-price span.a-offscreen',
        ),
        wait_selector='#productTitle, #title',
    ),
    'argos': SiteSelectors(
        site='argos',
        price_selectors=(
            '[data-test="product-price-primary"]',
            '[data-test="product-price"]',
            '.ProductPrice',
            '[class*="price" i]',
        ),
        wait_selector='[data-test="product-title"]',
    ),
    'ebay': SiteSelectors(
        site='ebay',
        price_selectors=(
            '[data-testid="x-price-primary"]',
            '.x-price-primary',
            '.x-price-approx',
            '.mainPrice',
            '.ux-textspans.ux-textspans--BOLD',
        ),
        wait_selector='[data-testid="x-item-title"]',
    ),
    'walmart': SiteSelectors(
        site='walmart',
        price_selectors=(
            '[data-automation-id="product-price"]',
            '[data-testid="price-main"]',
            '.f1.bold',
            '#price',
        ),
        wait_selector='[data-testid="product-title"]',
    ),
    'target': SiteSelectors(
        site='target',
        price_selectors=(
            '[data-test="product-price"]',
            '[data-test="current-price"]',
            '.styles__CurrentPriceFull',
        ),
        wait_selector='[data-test="product-title"]',
    ),
    'bestbuy': SiteSelectors(
        site='bestbuy',
        price_selectors=(
            '.priceView-customer-price span',
            '[data-testid="customer-price"]',
            '.pricing-price__regular-price',
        ),
        wait_selector='.sku-title',
    ),
    'johnlewis': SiteSelectors(
        site='johnlewis',
        price_selectors=(
            '.price--now',
            '.price',
            '[data-test="product-price"]',
            '[class*="price"]',
        ),
        wait_selector='[data-test="product-title"]',
    ),
    'pricerunner': SiteSelectors(
        site='pricerunner',
        price_selectors=(
            'span[class*="Price"]',
            'span[class*="price"]',
            '[data-testid="price"]',
        ),
        wait_selector='h1',
    ),
    GENERIC_SITE: SiteSelectors(
        site=GENERIC_SITE,
        price_selectors=(
            'meta[property="product:price:amount"]',
            'meta[property="og:price:amount"]',
            '[data-testid="price"]',
            '[data-test="price"]',
            '.price',
            '.product-price',
            '.Price',
            '#price',
        ),
    ),
}


def _hostname(url: str) -> Optional[str]:
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    if not host:
        return None
    return host[4:] if host.startswith('www.') else host


def resolve_site(url: str) -> str:
    """
    Resolve a product URL to a site identifier by parsing its hostname.

    Examples:
        >>> resolve_site("https://www.amazon.co.uk/dp/B0CXTPK12L")
        'amazon'
        >>> resolve_site("https://shop.example.com/p/1")
        'generic'
    """
    host = _hostname(url or '')
    if not host:
        return GENERIC_SITE

    for site, domain in SITE_DOMAINS.items():
        if host == domain or host.endswith('.' + domain):
            return site

    labels = host.split('.')
    for site, label in SITE_LABELS.items():
        if label in labels:
            return site

    return GENERIC_SITE


def get_site_selectors(url: str) -> SiteSelectors:
    """Selector set for a product URL; unknown sites get the generic set."""
    return SITE_SELECTORS[resolve_site(url)]
