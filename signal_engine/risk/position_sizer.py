"""
Position Sizer
Caps any single ticker at a fixed share of total portfolio value.

    total      = cash + sum(long_shares * long_cost_basis)
    limit      = 20% of total
    remaining  = limit - current position cost
    max        = min(remaining, cash)
"""

import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional, Sequence

from config.constants import MAX_POSITION_FRACTION
from utils.logger import resolve_logger
from utils.unified_schema import (
    Portfolio, PricePoint, RiskAssessment, RiskReasoning, sort_prices,
)


class PositionSizer:
    """Computes the remaining position limit per ticker."""

    def __init__(self, max_fraction: Decimal = Decimal(MAX_POSITION_FRACTION),
                 logger: Optional[logging.Logger] = None):
        if not Decimal(0) < Decimal(max_fraction) <= Decimal(1):
            raise ValueError(f"max_fraction must be in (0, 1], got {max_fraction}")
        self.max_fraction = Decimal(max_fraction)
        self.logger = resolve_logger(logger, 'position_sizer')

    @staticmethod
    def portfolio_value(portfolio: Portfolio) -> Decimal:
        """Cash plus the cost basis of all long positions."""
        invested = sum(
            (Decimal(p.long_shares) * p.long_cost_basis for p in portfolio.positions.values()),
            Decimal(0),
        )
        return portfolio.cash + invested

    def assess(self, ticker: str, portfolio: Portfolio,
               latest_price: Optional[Decimal]) -> Optional[RiskAssessment]:
        """
        Remaining allowable position for one ticker.

        Returns:
            RiskAssessment, or None when no price is available
        """
        if latest_price is None:
            return None

        position = portfolio.position(ticker)
        current = Decimal(position.long_shares) * position.long_cost_basis
        total = self.portfolio_value(portfolio)
        limit = total * self.max_fraction
        remaining = limit - current
        max_position = min(remaining, portfolio.cash)

        return RiskAssessment(
            ticker=ticker,
            remaining_position_limit=max_position,
            current_price=latest_price,
            reasoning=RiskReasoning(
                portfolio_value=total,
                current_position=current,
                position_limit=limit,
                remaining_limit=remaining,
                available_cash=portfolio.cash,
            ),
        )

    def assess_batch(
        self,
        tickers: Iterable[str],
        portfolio: Portfolio,
        prices_by_ticker: Dict[str, Sequence[PricePoint]],
    ) -> Dict[str, RiskAssessment]:
        """
        Assess every ticker with price data; tickers without prices are
        skipped with a warning.
        """
        assessments: Dict[str, RiskAssessment] = {}
        for ticker in tickers:
            prices = prices_by_ticker.get(ticker) or []
            if not prices:
                self.logger.warning(f"{ticker}: no price data, skipping risk assessment")
                continue
            latest_price = sort_prices(list(prices))[-1].close
            assessment = self.assess(ticker, portfolio, latest_price)
            if assessment is not None:
                assessments[ticker] = assessment
                self.logger.debug(
                    f"{ticker}: remaining position limit {assessment.remaining_position_limit:.2f}")
        return assessments
