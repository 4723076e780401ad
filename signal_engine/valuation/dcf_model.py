"""
DCF (Discounted Cash Flow) Model
Risk-tiered DCF valuation on owner earnings or free cash flow.

All arithmetic is Decimal; powers are computed exactly by repeated squaring
so results do not drift through binary floating point.
"""

import logging
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from config.analysis_config import MAINTENANCE_CAPEX_RATIO, RISK_TIER_ASSUMPTIONS
from config.constants import DCF_PROJECTION_YEARS
from utils.logger import resolve_logger
from utils.unified_schema import MetricsSnapshot, RiskLevel
from .base_model import BaseValuationModel

BASIS_LABELS = {
    "owner_earnings": "Owner Earnings",
    "free_cash_flow": "Free Cash Flow",
}


def exact_power(base: Decimal, exponent: int) -> Decimal:
    """
    Raise a Decimal to a non-negative integer power by square-and-multiply.

    Examples:
        >>> exact_power(Decimal("1.1"), 2)
        Decimal('1.21')
        >>> exact_power(Decimal("5"), 0)
        Decimal('1')

    Raises:
        ValueError: if exponent is negative
    """
    if exponent < 0:
        raise ValueError(f"exponent must be non-negative, got {exponent}")
    result = Decimal(1)
    while exponent > 0:
        if exponent & 1:
            result *= base
        base *= base
        exponent >>= 1
    return result


class DCFAssumptions(BaseModel):
    """Growth, discount rate, exit multiple and horizon for one projection."""
    model_config = ConfigDict(frozen=True)

    growth_rate: Decimal
    discount_rate: Decimal
    terminal_multiple: int
    years: int = DCF_PROJECTION_YEARS

    @classmethod
    def for_risk_level(cls, risk_level: RiskLevel) -> "DCFAssumptions":
        tier = RISK_TIER_ASSUMPTIONS[RiskLevel(risk_level).value]
        return cls(
            growth_rate=tier["growth_rate"],
            discount_rate=tier["discount_rate"],
            terminal_multiple=tier["terminal_multiple"],
        )


class DCFProjection(BaseModel):
    """Present value of the explicit years plus the discounted exit value."""
    model_config = ConfigDict(frozen=True)

    basis: Decimal
    present_value: Decimal
    terminal_value: Decimal

    @property
    def total(self) -> Decimal:
        return self.present_value + self.terminal_value


class ValuationSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    ticker: str
    risk_level: RiskLevel
    basis_label: str
    valuation_basis: Decimal
    growth_rate: Decimal
    discount_rate: Decimal
    terminal_multiple: int
    projection_years: int
    intrinsic_value_total: Decimal
    intrinsic_value: Decimal
    current_price: Optional[Decimal] = None
    margin_of_safety: Optional[Decimal] = None


class ValuationFailure(BaseModel):
    """Why a valuation could not be produced."""
    model_config = ConfigDict(frozen=True)

    ticker: str
    risk_level: RiskLevel
    reason: str


class DCFModel(BaseValuationModel):
    """
    Risk-tiered DCF.

    - Low: owner earnings = NI + D&A - 0.75 x capex, 5% / 9% / 12x
    - Medium: FCF = OCF - capex, 8% / 7% / 16x
    - High: FCF = OCF - capex, 12% / 6% / 20x

    Ten explicit years plus a terminal multiple on year-N cash flow.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = resolve_logger(logger, 'dcf_model')

    def get_model_name(self) -> str:
        return "dcf"

    def get_model_display_name(self) -> str:
        return "DCF Model"

    @staticmethod
    def project(basis: Decimal, assumptions: DCFAssumptions) -> DCFProjection:
        """
        Discount `years` of growing cash flow plus a terminal exit value.

        Args:
            basis: Year-0 cash flow
            assumptions: Growth, discount, exit multiple and horizon

        Returns:
            DCFProjection with present and terminal values
        """
        growth = Decimal(1) + assumptions.growth_rate
        discount = Decimal(1) + assumptions.discount_rate

        present_value = Decimal(0)
        for year in range(1, assumptions.years + 1):
            present_value += basis * exact_power(growth, year) / exact_power(discount, year)

        terminal_value = (
            basis * exact_power(growth, assumptions.years) * assumptions.terminal_multiple
            / exact_power(discount, assumptions.years)
        )
        return DCFProjection(basis=basis, present_value=present_value, terminal_value=terminal_value)

    @staticmethod
    def valuation_basis(latest: MetricsSnapshot, risk_level: RiskLevel) -> Optional[Decimal]:
        """Owner earnings for the low tier, free cash flow otherwise."""
        tier = RISK_TIER_ASSUMPTIONS[RiskLevel(risk_level).value]
        if tier["basis"] == "owner_earnings":
            if None in (latest.net_income, latest.depreciation_and_amortization, latest.capital_expenditure):
                return None
            maintenance_capex = latest.capital_expenditure * MAINTENANCE_CAPEX_RATIO
            return latest.net_income + latest.depreciation_and_amortization - maintenance_capex
        return latest.free_cash_flow

    def intrinsic_value(
        self,
        latest: Optional[MetricsSnapshot],
        risk_level: RiskLevel,
        current_price: Optional[Decimal] = None,
    ) -> Union[ValuationSummary, ValuationFailure]:
        """
        Per-share intrinsic value and margin of safety for one snapshot.

        Margin of safety is (value - price) / price, and None unless a
        positive price is supplied.
        """
        risk_level = RiskLevel(risk_level)
        if latest is None:
            return self._fail("", risk_level, "no metrics snapshot available")

        ticker = latest.ticker
        shares = latest.outstanding_shares
        if shares is None:
            return self._fail(ticker, risk_level, "missing outstanding shares")
        if shares == 0:
            return self._fail(ticker, risk_level, "outstanding shares is 0")

        basis = self.valuation_basis(latest, risk_level)
        if basis is None:
            return self._fail(ticker, risk_level, "missing required metrics for valuation basis")

        assumptions = DCFAssumptions.for_risk_level(risk_level)
        projection = self.project(basis, assumptions)
        per_share = projection.total / shares

        margin_of_safety = None
        if current_price is not None and current_price > 0:
            margin_of_safety = (per_share - current_price) / current_price

        self.logger.debug(
            f"{ticker}: {risk_level.value} DCF intrinsic value {per_share:.2f} per share")

        return ValuationSummary(
            ticker=ticker,
            risk_level=risk_level,
            basis_label=BASIS_LABELS[RISK_TIER_ASSUMPTIONS[risk_level.value]["basis"]],
            valuation_basis=basis,
            growth_rate=assumptions.growth_rate,
            discount_rate=assumptions.discount_rate,
            terminal_multiple=assumptions.terminal_multiple,
            projection_years=assumptions.years,
            intrinsic_value_total=projection.total,
            intrinsic_value=per_share,
            current_price=current_price,
            margin_of_safety=margin_of_safety,
        )

    def _fail(self, ticker: str, risk_level: RiskLevel, reason: str) -> ValuationFailure:
        self.logger.warning(f"{ticker or 'unknown'}: valuation basis could not be determined ({reason})")
        return ValuationFailure(ticker=ticker, risk_level=risk_level, reason=reason)
