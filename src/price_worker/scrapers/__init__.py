"""
Scrapers Module
Headless-browser page fetching and storefront definitions
"""

from price_worker.scrapers.page_fetcher import PageFetcher, PageScrape, SearchCandidate, browser_session

__all__ = [
    'PageFetcher',
    'PageScrape',
    'SearchCandidate',
    'browser_session',
]
