"""
Store Definitions
Immutable descriptors for comparison storefronts and retailer product pages
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import quote


@dataclass(frozen=True)
class StoreConfig:
    """
    A storefront searched for comparison offers.

    Attributes:
        name: Display name, also the comparison row key (e.g., 'Best Buy')
        search_url_template: Search URL with a ``{query}`` placeholder
        price_selector: CSS selector(s) for price text inside one result
        title_selector: CSS selector for title text inside one result
        result_selector: CSS selector matching one result container
    """
    name: str
    search_url_template: str
    price_selector: str
    title_selector: str
    result_selector: str

    def search_url(self, query: str) -> str:
        """
        Build the fully-formed search URL for a query.

        Example:
            >>> StoreConfig('eBay', 'https://www.ebay.com/sch/i.html?_nkw={query}', '', '', '').search_url('Sony WH-1000XM5')
            'https://www.ebay.com/sch/i.html?_nkw=Sony%20WH-1000XM5'
        """
        return self.search_url_template.format(query=quote(query, safe=''))


@dataclass(frozen=True)
class SiteSelectors:
    """
    Selector set for scraping a retailer's own product page.

    Attributes:
        site: Site identifier (e.g., 'amazon', 'generic')
        price_selectors: Price selectors in priority order
        wait_selector: Selector signalling the product content has rendered
    """
    site: str
    price_selectors: Tuple[str, ...]
    wait_selector: Optional[str] = None

    @property
    def price_selector(self) -> str:
        """Alternatives joined so the browser evaluates them in DOM order."""
        return ', '.join(self.price_selectors)
