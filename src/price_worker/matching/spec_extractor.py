"""
Product Spec Extraction
Pulls size, storage, screen-size and size-class tokens out of product names
and builds comparison search queries from them
"""

import re
from dataclasses import dataclass, field
from typing import List

# Spec patterns (all case-insensitive)
VOLUME_PATTERN = re.compile(
    r'\d+(?:\.\d+)?\s*(?:fl\.?\s*oz|oz|ml|liter|litre|l|gallon|gal|quart|qt)\b',
    re.IGNORECASE,
)
STORAGE_PATTERN = re.compile(r'\d+\s*(?:GB|TB|MB)\b', re.IGNORECASE)
SCREEN_PATTERN = re.compile(
    r'(?<![\w.])(\d+(?:\.\d+)?)\s*(?:"|\'|inch(?:es)?\b|in\b)?(?![\w.])',
    re.IGNORECASE,
)
SIZE_CLASS_PATTERN = re.compile(r'\b(?:small|medium|large|xl|xxl|xs)\b', re.IGNORECASE)

# Screen sizes outside this range are years, quantities or model numbers
SCREEN_SIZE_MIN = 5
SCREEN_SIZE_MAX = 100

# Query construction
MAX_QUERY_KEYWORDS = 5
QUERY_STOP_WORDS = frozenset({'with', 'the', 'and', 'for', 'from'})

_QUERY_NON_WORD = re.compile(r'[^\w\s-]')


@dataclass
class ProductSpecs:
    brand: str
    specs: List[str] = field(default_factory=list)
    clean_name: str = ''


def _screen_tokens(name: str) -> List[str]:
    tokens = []
    for match in SCREEN_PATTERN.finditer(name):
        value = float(match.group(1))
        if SCREEN_SIZE_MIN <= value <= SCREEN_SIZE_MAX:
            tokens.append(match.group(0).strip())
    return tokens


def extract_product_specs(name: str) -> ProductSpecs:
    """
    Extract key specifications from a product name.

    Each rule runs independently over the whole name and results accumulate
    in rule order: volume, storage, screen size, size class.

    Args:
        name: Free-text product name (e.g., "Stanley Quencher 40oz Tumbler")

    Returns:
        ProductSpecs with brand guess (first word if longer than 2 chars),
        spec tokens and the original name

    Example:
        >>> extract_product_specs("Samsung Galaxy S24 256GB").specs
        ['256GB']
    """
    specs: List[str] = []
    specs.extend(m.group(0).strip() for m in VOLUME_PATTERN.finditer(name))
    specs.extend(m.group(0).strip() for m in STORAGE_PATTERN.finditer(name))
    specs.extend(_screen_tokens(name))
    specs.extend(m.group(0).strip() for m in SIZE_CLASS_PATTERN.finditer(name))

    words = name.split()
    brand = words[0] if words and len(words[0]) > 2 else ''

    return ProductSpecs(brand=brand, specs=specs, clean_name=name)


def build_search_query(product_name: str) -> str:
    """
    Build a comparison search query: the first significant keywords plus any
    spec tokens the keywords don't already carry.

    Example:
        >>> build_search_query("Stanley Quencher Tumbler with Handle 40 oz")
        'Stanley Quencher Tumbler Handle 40 oz'
    """
    words = _QUERY_NON_WORD.sub(' ', product_name).split()
    keywords = [
        w for w in words
        if len(w) > 2 and w.lower() not in QUERY_STOP_WORDS
    ][:MAX_QUERY_KEYWORDS]

    terms = list(keywords)
    for spec in extract_product_specs(product_name).specs:
        spec_lower = spec.lower()
        if any(spec_lower in term.lower() for term in terms):
            continue
        terms.append(spec)

    return ' '.join(terms)
