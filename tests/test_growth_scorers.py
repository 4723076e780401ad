"""Tests for growth, risk/reward and disruptive-potential scorers."""

import pandas as pd
import pytest

from signal_engine.scoring import (
    score_disruptive_potential,
    score_growth_momentum,
    score_risk_reward,
)
from signal_engine.scoring.growth_scorers import close_series, daily_return_volatility


class TestPriceHelpers:
    """Tests for the pandas price helpers."""

    def test_close_series_is_sorted(self, make_prices) -> None:
        """Test closes come back oldest first with a datetime index."""
        prices = list(reversed(make_prices([100.0, 101.0, 102.0])))

        closes = close_series(prices)

        assert isinstance(closes.index, pd.DatetimeIndex)
        assert closes.tolist() == [100.0, 101.0, 102.0]

    def test_flat_prices_have_zero_volatility(self, make_prices) -> None:
        """Test constant closes give zero standard deviation."""
        assert daily_return_volatility(make_prices([50.0] * 5)) == 0.0

    def test_single_price_has_no_volatility(self, make_prices) -> None:
        """Test one close has no returns."""
        assert daily_return_volatility(make_prices([50.0])) is None


class TestGrowthMomentum:
    """Tests for growth and price momentum."""

    def test_strong_growth_and_momentum(self, make_snapshot, make_prices) -> None:
        """Test raw 8 of 9 scales down to 8."""
        metrics = [make_snapshot(2022, revenue=100, earnings_per_share=1.0),
                   make_snapshot(2023, revenue=140, earnings_per_share=1.2)]
        closes = [100.0 + 60.0 * i / 39 for i in range(40)]

        result = score_growth_momentum(metrics, prices=make_prices(closes))

        assert result.score == 8
        assert result.title == "Growth & Momentum"
        assert "Strong revenue growth: 40.0%" in result.details
        assert "Moderate EPS growth: 20.0%" in result.details

    def test_short_price_history(self, make_snapshot, make_prices) -> None:
        """Test 30 or fewer closes skip the momentum check."""
        metrics = [make_snapshot(2022, revenue=100), make_snapshot(2023, revenue=140)]

        result = score_growth_momentum(metrics, prices=make_prices([100.0] * 30))

        assert "Not enough recent price data for momentum analysis." in result.details
        assert result.score == 3

    def test_no_data(self) -> None:
        """Test no inputs is insufficient."""
        assert score_growth_momentum([], [], []).is_insufficient


class TestRiskReward:
    """Tests for leverage and volatility scoring."""

    def test_low_risk(self, make_snapshot, make_prices) -> None:
        """Test low debt and flat prices reach the maximum."""
        metrics = [make_snapshot(2023, total_debt=20, shareholder_equity=100)]

        result = score_risk_reward(metrics, make_prices([100.0] * 20))

        assert result.score == 10

    def test_very_high_volatility(self, make_snapshot, make_prices) -> None:
        """Test swings of about 5% a day earn no volatility points."""
        metrics = [make_snapshot(2023, total_debt=20, shareholder_equity=100)]
        closes = [100.0 if i % 2 == 0 else 105.0 for i in range(20)]

        result = score_risk_reward(metrics, make_prices(closes))

        assert result.score == 5
        assert any(d.startswith("Very high volatility") for d in result.details)

    def test_uses_latest_leverage(self, make_snapshot, make_prices) -> None:
        """Test only the newest debt and equity are used."""
        metrics = [make_snapshot(2023, total_debt=200, shareholder_equity=100),
                   make_snapshot(2020, total_debt=1, shareholder_equity=100)]

        result = score_risk_reward(metrics, make_prices([100.0] * 5))

        assert "High debt-to-equity: 2.00" in result.details

    @pytest.mark.parametrize("with_metrics", [True, False])
    def test_missing_input_is_insufficient(self, make_snapshot, make_prices, with_metrics) -> None:
        """Test either input missing is insufficient."""
        metrics = [make_snapshot(2023)] if with_metrics else []
        prices = [] if with_metrics else make_prices([1.0, 2.0])

        assert score_risk_reward(metrics, prices).is_insufficient


class TestDisruptivePotential:
    """Tests for innovation signals."""

    def test_disruptive_profile(self, make_snapshot, make_period) -> None:
        """Test an accelerating, high-margin, R&D-heavy company caps at 5."""
        metrics = [make_snapshot(2021, revenue=100, gross_margin=0.4),
                   make_snapshot(2022, revenue=150, gross_margin=0.5),
                   make_snapshot(2023, revenue=330, gross_margin=0.6)]
        periods = [make_period(2021, OperatingExpense=50, ResearchAndDevelopment=20),
                   make_period(2022, OperatingExpense=60, ResearchAndDevelopment=40),
                   make_period(2023, OperatingExpense=70, ResearchAndDevelopment=66)]

        result = score_disruptive_potential(metrics, periods)

        assert result.score == 5
        assert result.max_score == 5
        assert "Revenue growth is accelerating" in result.details
        assert "Positive operating leverage: Revenue growing faster than expenses" in result.details
        assert "High R&D investment: 20.0% of revenue" in result.details

    def test_missing_operating_expense(self, make_snapshot) -> None:
        """Test operating leverage needs operating expense data."""
        metrics = [make_snapshot(2021 + i, revenue=100) for i in range(3)]

        result = score_disruptive_potential(metrics)

        assert "Insufficient data for operating leverage analysis" in result.details
        assert result.score == 0

    def test_needs_three_periods(self, make_snapshot) -> None:
        """Test two periods are insufficient."""
        assert score_disruptive_potential([make_snapshot(2022), make_snapshot(2023)]).is_insufficient
