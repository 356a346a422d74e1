"""
Text Similarity
Edit-distance similarity and keyword coverage between product names
"""

import re
from typing import List

from rapidfuzz.distance import Levenshtein

STOP_WORDS = frozenset({
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'with',
    'for', 'on', 'at', 'to', 'from', 'by', 'of', 'as',
})

_NON_WORD = re.compile(r'[^\w\s-]')


def levenshtein_distance(str1: str, str2: str) -> int:
    """Case-insensitive Levenshtein distance between two strings."""
    return Levenshtein.distance(str1.lower(), str2.lower())


def similarity(str1: str, str2: str) -> float:
    """
    Normalized edit-distance similarity in [0, 1], where 1 is identical.

    Two empty strings are treated as identical.

    Examples:
        >>> similarity("Sony", "sony")
        1.0
        >>> similarity("", "")
        1.0
    """
    max_len = max(len(str1), len(str2))
    if max_len == 0:
        return 1.0
    return 1.0 - levenshtein_distance(str1, str2) / max_len


def extract_keywords(text: str) -> List[str]:
    """Lower-cased significant tokens (length > 2, not a stop word), in order."""
    cleaned = _NON_WORD.sub(' ', text.lower())
    return [
        word for word in cleaned.split()
        if len(word) > 2 and word not in STOP_WORDS
    ]


def keyword_overlap(target: str, candidate: str) -> float:
    """
    Fraction of the target's significant keywords that also appear in the candidate.

    Directional: measures how much of ``target`` is covered by ``candidate``.
    Returns 0.0 when the target has no significant keywords.
    """
    target_keywords = set(extract_keywords(target))
    if not target_keywords:
        return 0.0

    candidate_keywords = set(extract_keywords(candidate))
    matches = len(target_keywords & candidate_keywords)
    return matches / len(target_keywords)
