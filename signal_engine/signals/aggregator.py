"""
Signal Aggregator
Combines category scores into a total and maps it to a signal.
"""

from decimal import Decimal
from typing import Dict, Mapping, NamedTuple, Optional, Sequence

from config.analysis_config import SIGNAL_THRESHOLDS, WEIGHTED_MAX_SCORE
from signal_engine.scoring import ScoreResult


class AggregateResult(NamedTuple):
    total: Decimal
    max_score: Decimal
    signal: str


def map_signal(total: Decimal, max_score: Decimal) -> str:
    """
    Map a total against its maximum.

    Examples:
        >>> map_signal(Decimal("7"), Decimal("10"))
        'bullish'
        >>> map_signal(Decimal("3"), Decimal("10"))
        'bearish'
        >>> map_signal(Decimal("5"), Decimal("10"))
        'neutral'
    """
    total = Decimal(total)
    max_score = Decimal(max_score)
    if total >= SIGNAL_THRESHOLDS["BULLISH_RATIO"] * max_score:
        return "bullish"
    if total <= SIGNAL_THRESHOLDS["BEARISH_RATIO"] * max_score:
        return "bearish"
    return "neutral"


def validate_weights(weights: Mapping[str, Decimal]) -> Dict[str, Decimal]:
    """
    Weights must sum to exactly 1.

    Raises:
        ValueError: if the weights do not sum to 1
    """
    converted = {title: Decimal(str(weight)) for title, weight in weights.items()}
    total = sum(converted.values(), Decimal(0))
    if total != Decimal(1):
        raise ValueError(f"Weights must sum to 1.0, got {total}")
    return converted


def aggregate(
    scores: Sequence[ScoreResult],
    weights: Optional[Mapping[str, Decimal]] = None,
    max_score: Optional[int] = None,
) -> AggregateResult:
    """
    Sum category scores and map the total to a signal.

    Unweighted: total = sum of scores, max = sum of category maxima (or the
    explicit max_score). Weighted: each score is multiplied by the weight
    keyed by its title, and the max is fixed (default 10).

    Raises:
        ValueError: if weights do not sum to 1 or a category has no weight
    """
    if weights is None:
        total = sum((Decimal(s.score) for s in scores), Decimal(0))
        maximum = Decimal(max_score) if max_score is not None else \
            sum((Decimal(s.max_score) for s in scores), Decimal(0))
        return AggregateResult(total, maximum, map_signal(total, maximum))

    checked = validate_weights(weights)
    total = Decimal(0)
    for score in scores:
        if score.title not in checked:
            raise ValueError(f"No weight configured for category '{score.title}'")
        total += Decimal(score.score) * checked[score.title]
    maximum = Decimal(max_score if max_score is not None else WEIGHTED_MAX_SCORE)
    return AggregateResult(total, maximum, map_signal(total, maximum))


class SignalAggregator:
    """Aggregator bound to one strategy's weights and maximum."""

    def __init__(self, weights: Optional[Mapping[str, Decimal]] = None, max_score: Optional[int] = None):
        self.weights = validate_weights(weights) if weights is not None else None
        self.max_score = max_score

    def aggregate(self, scores: Sequence[ScoreResult]) -> AggregateResult:
        return aggregate(scores, self.weights, self.max_score)
