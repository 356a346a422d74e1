"""
URL Utilities
Derives currency conventions and provisional product names from product URLs
"""

import re
from typing import Optional
from urllib.parse import unquote, urlparse

# Stored names that are placeholders awaiting enrichment
PLACEHOLDER_PREFIXES = ('scraping', 'queued', 'pending')
MIN_NAME_LENGTH = 5

# Country-code TLDs using the euro
EURO_TLDS = {'de', 'fr', 'it', 'es'}


def _hostname(url: str) -> str:
    try:
        return (urlparse(url).hostname or '').lower()
    except ValueError:
        return ''


def currency_from_url(url: Optional[str]) -> Optional[str]:
    """
    Currency implied by a URL's domain, or None if the domain implies none.

    Examples:
        >>> currency_from_url("https://www.amazon.co.uk/dp/B0CXTPK12L")
        'GBP'
        >>> currency_from_url("https://www.amazon.com/dp/B0CXTPK12L") is None
        True
    """
    host = _hostname(url or '')
    if not host:
        return None

    tld = host.rsplit('.', 1)[-1]

    if host.endswith('.co.uk') or tld == 'uk':
        return 'GBP'
    if tld in EURO_TLDS:
        return 'EUR'
    if tld == 'ca':
        return 'CAD'
    if host.endswith('.com.au') or tld == 'au':
        return 'AUD'
    return None


def is_placeholder_name(name: Optional[str]) -> bool:
    """True if a stored name is a low-information placeholder (e.g. 'Scraping...')."""
    if not name:
        return True
    stripped = name.strip()
    return stripped.lower().startswith(PLACEHOLDER_PREFIXES) or len(stripped) < MIN_NAME_LENGTH


def name_from_url(url: Optional[str]) -> Optional[str]:
    """
    Derive a provisional product name from a URL path.

    Amazon-style ``/<slug>/dp/<ASIN>`` paths use the segment before ``dp``;
    otherwise the longest hyphenated path segment is used.

    Examples:
        >>> name_from_url("https://www.amazon.com/Sony-WH-1000XM5-Headphones/dp/B09XS7JWHH")
        'Sony WH 1000XM5 Headphones'
    """
    try:
        path = urlparse(url or '').path
    except ValueError:
        return None

    parts = [unquote(p) for p in path.split('/') if p]
    if not parts:
        return None

    if 'dp' in parts:
        dp_index = parts.index('dp')
        if dp_index > 0:
            return re.sub(r'[-_]', ' ', parts[dp_index - 1]).strip() or None

    slugs = [p for p in parts if len(p) > MIN_NAME_LENGTH and '-' in p]
    if not slugs:
        return None

    slug = max(slugs, key=len)
    slug = re.sub(r'\.(html?|aspx|php)$', '', slug)
    return re.sub(r'\s+', ' ', re.sub(r'[-_]', ' ', slug)).strip() or None
