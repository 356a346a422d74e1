"""
Search Result Ranking
Scores scraped search results against a target product and picks the single
best match, or none when no result is confident enough
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from price_worker.matching.similarity import keyword_overlap, similarity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringWeights:
    """Weights for the composite match score and the acceptance threshold."""
    title: float = 0.4
    keywords: float = 0.3
    position: float = 0.2
    price: float = 0.1
    threshold: float = 0.3
    position_decay: float = 0.05


DEFAULT_WEIGHTS = ScoringWeights()


@dataclass(frozen=True)
class RankedCandidate:
    title: str
    price: float
    position: int
    score: float
    title_score: float = 0.0
    keyword_score: float = 0.0
    position_score: float = 0.0
    price_score: float = 0.0


@dataclass(frozen=True)
class ComparisonMatch:
    title: str
    price: float
    currency: str
    score: float


def position_score(position: int, decay: float = DEFAULT_WEIGHTS.position_decay) -> float:
    """Earlier results score higher: 1.0 for the first, minus ``decay`` per slot."""
    return max(0.0, 1.0 - decay * position)


def price_plausibility(candidate_price: float, reference_price: Optional[float]) -> float:
    """
    How plausible a candidate price is relative to the product's own price.

    - No reference: neutral 0.5
    - Ratio within [0.5, 1.5]: 1 - |1 - ratio| (peaks at ratio 1)
    - Ratio below 0.5: 0.2 (accessory or cheaper variant)
    - Ratio above 1.5: 0.3 (bundle or different item)
    """
    if not reference_price or reference_price <= 0:
        return 0.5

    ratio = candidate_price / reference_price
    if 0.5 <= ratio <= 1.5:
        return 1.0 - abs(1.0 - ratio)
    if ratio < 0.5:
        return 0.2
    return 0.3


def score_candidate(
    candidate,
    target_name: str,
    reference_price: Optional[float] = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> RankedCandidate:
    """
    Score one raw search result.

    Args:
        candidate: Object with ``title``, ``price`` and ``position`` attributes
        target_name: Name of the tracked product
        reference_price: Product's own current price, if known
        weights: Scoring weights

    Returns:
        RankedCandidate with the composite score and its components
    """
    title_score = similarity(target_name, candidate.title)
    keyword_score = keyword_overlap(target_name, candidate.title)
    pos_score = position_score(candidate.position, weights.position_decay)
    price_score = price_plausibility(candidate.price, reference_price)

    total = (
        title_score * weights.title +
        keyword_score * weights.keywords +
        pos_score * weights.position +
        price_score * weights.price
    )

    return RankedCandidate(
        title=candidate.title,
        price=candidate.price,
        position=candidate.position,
        score=total,
        title_score=title_score,
        keyword_score=keyword_score,
        position_score=pos_score,
        price_score=price_score,
    )


def rank_candidates(
    candidates: Sequence,
    target_name: str,
    reference_price: Optional[float] = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> List[RankedCandidate]:
    """Score all candidates and sort by descending score (ties keep result order)."""
    scored = [
        score_candidate(candidate, target_name, reference_price, weights)
        for candidate in candidates
    ]
    return sorted(scored, key=lambda c: c.score, reverse=True)


def select_best_match(
    candidates: Sequence,
    target_name: str,
    reference_price: Optional[float] = None,
    currency: str = 'USD',
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> Optional[ComparisonMatch]:
    """
    Pick the best-matching search result, if it clears the threshold.

    Returns:
        ComparisonMatch stamped with ``currency``, or None if there are no
        candidates or the top score is below ``weights.threshold``
    """
    if not candidates:
        return None

    ranked = rank_candidates(candidates, target_name, reference_price, weights)
    best = ranked[0]

    logger.info(
        "Best match: \"%s\" (score: %.2f, price: %s %s) from %d results",
        best.title[:50], best.score, currency, best.price, len(ranked),
    )

    if best.score < weights.threshold:
        logger.info("Best match score too low (%.2f < %.2f), rejecting", best.score, weights.threshold)
        return None

    return ComparisonMatch(
        title=best.title,
        price=best.price,
        currency=currency,
        score=best.score,
    )
