"""
Strategy Engine
===============

Runs any StrategyDescriptor against one ticker's data:

1. DCF valuation (when the strategy names a risk tier)
2. Category scoring
3. Aggregation to a total and a mapped signal
4. LLM signal generation with deterministic fallback
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from signal_engine.llm import LLMSignalGenerator
from signal_engine.llm.signal_generator import SignalSource
from signal_engine.scoring import ScoreResult
from signal_engine.signals import SignalAggregator
from signal_engine.valuation import DCFModel, ValuationFailure, ValuationSummary
from utils.logger import resolve_logger
from utils.unified_schema import TickerData, TradeSignal
from .descriptor import StrategyDescriptor, Valuation


class CategoryBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    score: int
    max_score: int
    details: List[str] = Field(default_factory=list)

    @classmethod
    def from_score(cls, score: ScoreResult) -> "CategoryBreakdown":
        return cls(title=score.title, score=score.score, max_score=score.max_score,
                   details=list(score.details))


class StrategyReport(BaseModel):
    """Per ticker, per strategy output."""
    model_config = ConfigDict(frozen=True)

    ticker: str
    strategy: str
    display_name: str
    signal: TradeSignal
    source: SignalSource
    failure_reason: Optional[str] = None
    total_score: Decimal = Decimal(0)
    max_score: Decimal = Decimal(0)
    categories: List[CategoryBreakdown] = Field(default_factory=list)
    valuation: Optional[ValuationSummary] = None
    valuation_note: Optional[str] = None


class StrategyEngine:
    """
    Generic engine shared by every strategy.

    Args:
        signal_generator: LLM pipeline; defaults to one without a transport,
            which always produces the deterministic fallback
        valuation_model: DCF model used for strategies with a risk tier
        logger: Optional injected logger
    """

    def __init__(
        self,
        signal_generator: Optional[LLMSignalGenerator] = None,
        valuation_model: Optional[DCFModel] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = resolve_logger(logger, 'strategy_engine')
        self.signal_generator = signal_generator or LLMSignalGenerator(logger=self.logger)
        self.valuation_model = valuation_model or DCFModel(logger=self.logger)

    def value(self, descriptor: StrategyDescriptor, data: TickerData) -> Valuation:
        if descriptor.valuation_risk_level is None:
            return None
        return self.valuation_model.intrinsic_value(
            data.latest_metrics(), descriptor.valuation_risk_level, data.latest_price())

    def score(self, descriptor: StrategyDescriptor, data: TickerData,
              valuation: Valuation = None) -> List[ScoreResult]:
        return [category.score(data, valuation) for category in descriptor.categories]

    @staticmethod
    def build_analysis(total: Decimal, max_score: Decimal, scores: List[ScoreResult],
                       valuation: Valuation) -> Dict[str, Any]:
        """Analysis document handed to the LLM."""
        analysis: Dict[str, Any] = {
            "score": total,
            "max_score": max_score,
        }
        for score in scores:
            analysis[score.title] = score.to_dict()
        if isinstance(valuation, ValuationSummary):
            analysis["valuation_summary"] = valuation.model_dump(mode='json')
        return analysis

    def run(self, descriptor: StrategyDescriptor, data: TickerData) -> StrategyReport:
        """Score, aggregate and signal one ticker under one strategy."""
        ticker = data.ticker
        valuation = self.value(descriptor, data)
        scores = self.score(descriptor, data, valuation)
        aggregate = SignalAggregator(descriptor.weights, descriptor.max_score).aggregate(scores)

        self.logger.info(
            f"{ticker} [{descriptor.display_name}] "
            + "; ".join(s.summary() for s in scores)
            + f" -> {aggregate.total}/{aggregate.max_score} ({aggregate.signal})")

        analysis = self.build_analysis(aggregate.total, aggregate.max_score, scores, valuation)
        outcome = self.signal_generator.generate(
            ticker=ticker,
            system_prompt=descriptor.system_prompt,
            display_name=descriptor.display_name,
            analysis=analysis,
            scores=scores,
            aggregate=aggregate,
        )

        valuation_note = None
        if isinstance(valuation, ValuationFailure):
            valuation_note = f"Valuation unavailable: {valuation.reason}"

        return StrategyReport(
            ticker=ticker,
            strategy=descriptor.key,
            display_name=descriptor.display_name,
            signal=outcome.signal,
            source=outcome.source,
            failure_reason=outcome.failure_reason,
            total_score=aggregate.total,
            max_score=aggregate.max_score,
            categories=[CategoryBreakdown.from_score(s) for s in scores],
            valuation=valuation if isinstance(valuation, ValuationSummary) else None,
            valuation_note=valuation_note,
        )

    @staticmethod
    def unscored(descriptor: StrategyDescriptor, ticker: str, reason: str) -> StrategyReport:
        """Neutral, zero-confidence report for a ticker with no usable data."""
        signal = TradeSignal(
            ticker=ticker,
            signal='neutral',
            confidence=0,
            reasoning=f"No data available for {ticker}: {reason}",
        )
        return StrategyReport(
            ticker=ticker,
            strategy=descriptor.key,
            display_name=descriptor.display_name,
            signal=signal,
            source='unscored',
            failure_reason=reason,
        )
