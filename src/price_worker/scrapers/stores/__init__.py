"""
Stores Module
Comparison storefront directory and retailer product-page selectors
"""

from price_worker.scrapers.stores.base import SiteSelectors, StoreConfig
from price_worker.scrapers.stores.directory import STORE_REGISTRY, get_stores_for_currency
from price_worker.scrapers.stores.registry import StoreRegistry
from price_worker.scrapers.stores.sites import get_site_selectors, resolve_site

__all__ = [
    'SiteSelectors',
    'StoreConfig',
    'STORE_REGISTRY',
    'get_stores_for_currency',
    'StoreRegistry',
    'get_site_selectors',
    'resolve_site',
]
