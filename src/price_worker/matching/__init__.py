"""
Matching Module
Text similarity, spec extraction, price parsing and search-result ranking
"""

from price_worker.matching.price_parser import parse_price
from price_worker.matching.ranker import (
    DEFAULT_WEIGHTS,
    ComparisonMatch,
    RankedCandidate,
    ScoringWeights,
    rank_candidates,
    select_best_match,
)
from price_worker.matching.similarity import keyword_overlap, similarity
from price_worker.matching.spec_extractor import build_search_query, extract_product_specs

__all__ = [
    'parse_price',
    'DEFAULT_WEIGHTS',
    'ComparisonMatch',
    'RankedCandidate',
    'ScoringWeights',
    'rank_candidates',
    'select_best_match',
    'keyword_overlap',
    'similarity',
    'build_search_query',
    'extract_product_specs',
]
