"""
Price Normalization
Parses heterogeneous price text ($1,234.56, 12,99 €, £ 1 299.00) into floats
"""

import re
from typing import Optional

# Optional currency symbol, then either grouped digits (1,234 / 1.234 / 1 234)
# or a plain digit run, each with an optional 2-digit fraction.
PRICE_PATTERN = re.compile(
    r'[$£€]?\s*(\d{1,3}(?:[,.\s]\d{3})+(?:[.,]\d{2})?|\d+(?:[.,]\d{2})?)(?!\d)'
)
COMMA_DECIMAL = re.compile(r',\d{2}$')

# Anything outside this band is extraction noise (product IDs, SKUs, zero)
MIN_PRICE = 0.0
MAX_PRICE = 100000.0


def is_valid_price(value: float) -> bool:
    return MIN_PRICE < value < MAX_PRICE


def parse_price(text) -> Optional[float]:
    """
    Extract the first price-like number from text.

    Separator handling:
    - Ends in ",dd": comma is the decimal separator, periods are thousands
      separators (12,99 -> 12.99, 1.234,56 -> 1234.56)
    - Otherwise commas are thousands separators (1,234.56 -> 1234.56)

    Args:
        text: Raw text believed to contain a price

    Returns:
        Price as float, or None if no plausible price was found
    """
    if not isinstance(text, str) or not text.strip():
        return None

    match = PRICE_PATTERN.search(text)
    if not match:
        return None

    price_str = re.sub(r'\s', '', match.group(1))

    if COMMA_DECIMAL.search(price_str):
        price_str = price_str.replace('.', '').replace(',', '.')
    else:
        price_str = price_str.replace(',', '')

    try:
        price = float(price_str)
    except ValueError:
        return None

    return price if is_valid_price(price) else None
