"""Tests for the unified data schema and numeric helpers."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from utils.numeric_utils import growth_rate, safe_divide, safe_format, to_decimal
from utils.unified_schema import LineItem, PricePoint, TickerData, to_utc


class TestLineItem:
    """Tests for line item key parsing."""

    @pytest.mark.parametrize("key", ["TotalRevenue", "total_revenue", "TOTAL-REVENUE", "revenue"])
    def test_spellings(self, key) -> None:
        """Test case, separator and alias variants resolve."""
        assert LineItem.parse(key) is LineItem.TOTAL_REVENUE

    def test_operating_expense_alias(self) -> None:
        """Test the plural provider spelling resolves."""
        assert LineItem.parse("operating_expenses") is LineItem.OPERATING_EXPENSE

    @pytest.mark.parametrize("key", ["FreeCashFlow", "free_cash_flow", "FCF"])
    def test_free_cash_flow_is_not_a_line_item(self, key) -> None:
        """Test free cash flow is rejected in favour of the derived snapshot value."""
        with pytest.raises(ValueError, match="MetricsSnapshot.free_cash_flow"):
            LineItem.parse(key)

    def test_unknown_key(self) -> None:
        """Test an unknown key is rejected."""
        with pytest.raises(ValueError, match="Unknown line item"):
            LineItem.parse("MarketingBudget")


class TestModels:
    """Tests for the series models."""

    def test_period_line_items(self, make_period) -> None:
        """Test string keys and float values are normalized."""
        period = make_period(2023, total_revenue=1.5e9, Capex=-2.0)

        assert period.get(LineItem.TOTAL_REVENUE) == Decimal("1500000000.0")
        assert period.get("capital_expenditures") == Decimal("-2.0")
        assert period.has(LineItem.TOTAL_REVENUE)
        assert not period.has(LineItem.TOTAL_REVENUE, LineItem.EBIT)

    def test_period_rejects_unknown_line_item(self, make_period) -> None:
        """Test a line item outside the enum fails validation."""
        with pytest.raises(ValueError):
            make_period(2023, MarketingBudget=1)

    def test_period_cannot_store_free_cash_flow(self, make_period) -> None:
        """Test a period carrying free cash flow fails validation."""
        with pytest.raises(ValueError, match="derived"):
            make_period(2023, FreeCashFlow=100)

    def test_free_cash_flow_is_derived(self, make_snapshot) -> None:
        """Test FCF is operating cash flow minus capex."""
        assert make_snapshot(2023, operating_cash_flow=110, capital_expenditure=10).free_cash_flow == Decimal(100)
        assert make_snapshot(2023, operating_cash_flow=110).free_cash_flow is None

    def test_non_finite_metrics_become_none(self, make_snapshot) -> None:
        """Test NaN and infinity are dropped."""
        snapshot = make_snapshot(2023, market_cap=float("nan"), revenue=float("inf"))

        assert snapshot.market_cap is None
        assert snapshot.revenue is None

    def test_price_requires_finite_close(self) -> None:
        """Test a NaN close is rejected."""
        with pytest.raises(ValueError):
            PricePoint(date=date(2024, 1, 2), close=float("nan"))

    def test_duplicate_periods(self, make_period) -> None:
        """Test one ticker cannot report the same date twice."""
        with pytest.raises(ValueError, match="Duplicate period"):
            TickerData(ticker="TEST", fundamentals=[make_period(2023), make_period(2023)])

    def test_latest_accessors(self, make_snapshot, make_prices) -> None:
        """Test latest values come from the newest records."""
        data = TickerData(
            ticker="TEST",
            metrics=[make_snapshot(2023, market_cap=2), make_snapshot(2021, market_cap=1)],
            prices=list(reversed(make_prices([1.0, 2.0, 3.0]))),
        )

        assert data.latest_metrics().market_cap == Decimal(2)
        assert data.latest_price() == Decimal("3.0")
        assert not data.is_empty
        assert TickerData(ticker="NEW").is_empty

    def test_to_utc(self) -> None:
        """Test naive datetimes are read as UTC."""
        assert to_utc(datetime(2024, 1, 1, 12)) == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)


class TestNumericUtils:
    """Tests for null-safe numeric helpers."""

    def test_to_decimal(self) -> None:
        """Test floats go through their shortest repr."""
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(True) is None
        assert to_decimal("abc") is None

    def test_safe_divide(self) -> None:
        """Test zero and missing denominators give None."""
        assert safe_divide(10, 4) == Decimal("2.5")
        assert safe_divide(1, 0) is None
        assert safe_divide(None, 2) is None

    def test_growth_rate_uses_absolute_base(self) -> None:
        """Test growth from a negative base divides by its magnitude."""
        assert growth_rate(-2, -1) == Decimal("0.5")
        assert growth_rate(0, 5) is None

    def test_safe_format(self) -> None:
        """Test formatting and the missing-value default."""
        assert safe_format(0.1234, ".1%") == "12.3%"
        assert safe_format(None) == "N/A"
