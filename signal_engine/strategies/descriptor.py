"""
Strategy descriptors - declarative configuration of one investment strategy.

A descriptor names the categories to score, how to combine them and the
system prompt the LLM sees. One generic engine runs every descriptor.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Mapping, Optional, Tuple, Union

from signal_engine.scoring import ScoreResult
from signal_engine.signals import validate_weights
from signal_engine.valuation import ValuationFailure, ValuationSummary
from utils.unified_schema import RiskLevel, TickerData

Valuation = Union[ValuationSummary, ValuationFailure, None]

# (ticker data, DCF valuation or None) -> category score
CategoryScorer = Callable[[TickerData, Valuation], ScoreResult]


@dataclass(frozen=True)
class CategorySpec:
    """One scored category: a stable key and the scorer producing it."""
    key: str
    scorer: CategoryScorer

    def score(self, data: TickerData, valuation: Valuation = None) -> ScoreResult:
        return self.scorer(data, valuation)


@dataclass(frozen=True)
class StrategyDescriptor:
    """
    Everything that distinguishes one strategy from another.

    Attributes:
        key: Registry key, e.g. 'warren_buffett'
        display_name: Name used in prompts and reports
        system_prompt: Principles text sent as the system message
        categories: Scored categories, in report order
        weights: Category-title weights summing to 1, or None for a plain sum
        max_score: Fixed maximum; None means the sum of category maxima
        valuation_risk_level: DCF tier to run before scoring, or None
    """
    key: str
    display_name: str
    system_prompt: str
    categories: Tuple[CategorySpec, ...]
    weights: Optional[Mapping[str, Decimal]] = None
    max_score: Optional[int] = None
    valuation_risk_level: Optional[RiskLevel] = None
    description: str = field(default="", compare=False)

    def __post_init__(self):
        if not self.key:
            raise ValueError("Strategy key must not be empty")
        if not self.categories:
            raise ValueError(f"Strategy '{self.key}' has no categories")
        if self.weights is not None:
            object.__setattr__(self, 'weights', validate_weights(self.weights))

    @property
    def is_weighted(self) -> bool:
        return self.weights is not None
