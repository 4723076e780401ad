"""
Trading Workflow
================

Drives a batch of tickers through the selected strategies:

    provider -> StrategyEngine (per strategy) -> PositionSizer

A ticker the provider cannot serve is still reported: every strategy gets a
neutral, zero-confidence report and the batch moves on.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from data_acquisition.base_provider import MarketDataProvider
from signal_engine.risk import PositionSizer
from signal_engine.strategies import StrategyDescriptor, StrategyEngine, StrategyReport, registry
from signal_engine.strategies.registry import StrategyRegistry
from utils.exceptions import DataUnavailableError
from utils.logger import resolve_logger
from utils.unified_schema import Portfolio, PricePoint, RiskAssessment


class WorkflowResult(BaseModel):
    """Reports keyed ticker -> strategy, plus per-ticker risk assessments."""
    model_config = ConfigDict(frozen=True)

    reports: Dict[str, Dict[str, StrategyReport]] = Field(default_factory=dict)
    risk: Dict[str, RiskAssessment] = Field(default_factory=dict)

    def signals(self) -> List[StrategyReport]:
        return [report for by_strategy in self.reports.values() for report in by_strategy.values()]


class TradingWorkflow:
    """
    Batch runner over a data provider.

    Args:
        provider: Source of per-ticker series
        strategies: Strategy keys or descriptors; defaults to every registered strategy
        engine: Shared StrategyEngine
        position_sizer: Risk pass; skipped when no portfolio is given to run()
        strategy_registry: Registry used to resolve keys
        logger: Optional injected logger
    """

    def __init__(
        self,
        provider: MarketDataProvider,
        strategies: Optional[Sequence[Union[str, StrategyDescriptor]]] = None,
        engine: Optional[StrategyEngine] = None,
        position_sizer: Optional[PositionSizer] = None,
        strategy_registry: Optional[StrategyRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = resolve_logger(logger, 'trading_workflow')
        self.provider = provider
        self.registry = strategy_registry or registry
        self.strategies = self._resolve(strategies)
        self.engine = engine or StrategyEngine(logger=self.logger)
        self.position_sizer = position_sizer or PositionSizer(logger=self.logger)

    def _resolve(self, strategies) -> List[StrategyDescriptor]:
        if strategies is None:
            return self.registry.resolve(self.registry.names())
        return [s if isinstance(s, StrategyDescriptor) else self.registry.get(s) for s in strategies]

    def run_ticker(self, ticker: str, as_of: Optional[datetime] = None):
        """
        Run every strategy for one ticker.

        Returns:
            (reports by strategy key, price series); prices are empty when the
            provider could not serve the ticker
        """
        try:
            data = self.provider.load_ticker(ticker, as_of=as_of)
        except DataUnavailableError as e:
            self.logger.warning(f"{ticker}: {e.message}; reporting neutral signals")
            reports = {d.key: StrategyEngine.unscored(d, ticker, e.message) for d in self.strategies}
            return reports, []

        reports: Dict[str, StrategyReport] = {}
        for descriptor in self.strategies:
            reports[descriptor.key] = self.engine.run(descriptor, data)
        return reports, data.price_series()

    def run(
        self,
        tickers: Iterable[str],
        portfolio: Optional[Portfolio] = None,
        as_of: Optional[datetime] = None,
    ) -> WorkflowResult:
        """
        Score every ticker under every selected strategy.

        Args:
            tickers: Tickers to analyze, in order
            portfolio: When given, a risk assessment is produced per ticker with prices
            as_of: Point-in-time cutoff passed to the provider
        """
        tickers = [t.strip().upper() for t in tickers if t and t.strip()]
        self.logger.info(
            f"Running {len(self.strategies)} strategies over {len(tickers)} tickers")

        reports: Dict[str, Dict[str, StrategyReport]] = {}
        prices_by_ticker: Dict[str, List[PricePoint]] = {}
        for index, ticker in enumerate(tickers, 1):
            self.logger.debug(f"[{index}/{len(tickers)}] {ticker}")
            reports[ticker], prices_by_ticker[ticker] = self.run_ticker(ticker, as_of)

        risk: Dict[str, RiskAssessment] = {}
        if portfolio is not None:
            risk = self.position_sizer.assess_batch(tickers, portfolio, prices_by_ticker)

        return WorkflowResult(reports=reports, risk=risk)
