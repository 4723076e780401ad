"""Tests for earnings stability, financial strength and net-asset valuation."""

from decimal import Decimal

from signal_engine.scoring import (
    ScoreResult,
    score_earnings_stability,
    score_financial_strength,
    score_net_asset_valuation,
)


class TestScoreResult:
    """Tests for the immutable score builder."""

    def test_add_returns_new_instance(self) -> None:
        """Test add leaves the original untouched."""
        base = ScoreResult.start("Demo", 4)
        added = base.add(2, "two points")

        assert base.score == 0 and base.details == ()
        assert added.score == 2
        assert added.details == ("two points",)

    def test_negative_score_clamps_to_zero(self) -> None:
        """Test a negative total is floored at zero."""
        assert ScoreResult("Demo", 10, score=-3).score == 0

    def test_insufficient_is_recognizable(self) -> None:
        """Test insufficient results carry a zero score and marker detail."""
        result = ScoreResult.insufficient("Demo", 5, "no rows")

        assert result.score == 0
        assert result.is_insufficient
        assert result.details == ("Insufficient data: no rows",)

    def test_capped_and_summary(self) -> None:
        """Test capping and the one-line summary."""
        result = ScoreResult("Demo", 4, score=9).capped()

        assert result.score == 4
        assert result.summary() == "Demo 4/4"
        assert result.to_dict()["max_score"] == 4


class TestEarningsStability:
    """Tests for the EPS record scorer."""

    def test_positive_and_growing_eps(self, make_snapshot) -> None:
        """Test EPS 1.0 -> 1.2 -> 1.5 earns the full 4 points."""
        metrics = [make_snapshot(2021, earnings_per_share=1.0),
                   make_snapshot(2022, earnings_per_share=1.2),
                   make_snapshot(2023, earnings_per_share=1.5)]

        result = score_earnings_stability(metrics)

        assert result.score == 4
        assert result.max_score == 4
        assert any("positive in all periods" in d for d in result.details)
        assert any("EPS grew" in d for d in result.details)

    def test_input_order_does_not_matter(self, make_snapshot) -> None:
        """Test newest-first input scores the same as oldest-first."""
        metrics = [make_snapshot(2023, earnings_per_share=1.5),
                   make_snapshot(2021, earnings_per_share=1.0),
                   make_snapshot(2022, earnings_per_share=1.2)]

        assert score_earnings_stability(metrics).score == 4

    def test_mostly_positive(self, make_snapshot) -> None:
        """Test 80% positive periods earn 2 points plus growth."""
        values = [-1, 1, 2, 3, 4]
        metrics = [make_snapshot(2019 + i, earnings_per_share=v) for i, v in enumerate(values)]

        result = score_earnings_stability(metrics)

        assert result.score == 3
        assert "EPS was positive in most periods." in result.details

    def test_zero_initial_eps_is_undefined_growth(self, make_snapshot) -> None:
        """Test growth from zero is reported, not divided."""
        metrics = [make_snapshot(2022, earnings_per_share=0),
                   make_snapshot(2023, earnings_per_share=1)]

        result = score_earnings_stability(metrics)

        assert any("undefined" in d for d in result.details)

    def test_single_period_is_insufficient(self, make_snapshot) -> None:
        """Test one EPS value is not enough."""
        result = score_earnings_stability([make_snapshot(2023, earnings_per_share=1.0)])

        assert result.score == 0
        assert result.is_insufficient


class TestFinancialStrength:
    """Tests for liquidity and leverage scoring."""

    def test_strong_current_ratio(self, make_period) -> None:
        """Test current assets 200 vs liabilities 80 earns 2 points."""
        result = score_financial_strength(
            [make_period(2023, TotalCurrentAssets=200, TotalCurrentLiabilities=80)])

        assert result.score == 2
        assert "Current ratio = 2.50" in result.details
        assert any("Debt ratio unavailable" in d for d in result.details)

    def test_low_debt_ratio(self, make_period) -> None:
        """Test liabilities at 40% of assets earn 2 points."""
        result = score_financial_strength(
            [make_period(2023, TotalAssets=1000, TotalLiabilities=400)])

        assert result.score == 2
        assert "Debt ratio = 0.40" in result.details

    def test_uses_latest_balance_sheet(self, make_period) -> None:
        """Test only the newest period is scored."""
        periods = [make_period(2023, TotalCurrentAssets=100, TotalCurrentLiabilities=100),
                   make_period(2020, TotalCurrentAssets=300, TotalCurrentLiabilities=100)]

        result = score_financial_strength(periods)

        assert "Current ratio = 1.00" in result.details
        assert result.score == 0

    def test_zero_current_liabilities(self, make_period) -> None:
        """Test a zero denominator yields a detail and no points."""
        result = score_financial_strength(
            [make_period(2023, TotalCurrentAssets=100, TotalCurrentLiabilities=0)])

        assert result.score == 0
        assert any("undefined" in d for d in result.details)

    def test_no_balance_sheet(self) -> None:
        """Test no periods is insufficient."""
        assert score_financial_strength([]).is_insufficient


class TestNetAssetValuation:
    """Tests for the net-net and Graham Number checks."""

    def test_net_net(self, make_snapshot, make_period) -> None:
        """Test NCAV above market cap earns 4 points."""
        result = score_net_asset_valuation(
            [make_snapshot(2023, market_cap=1_000_000_000)],
            [make_period(2023, TotalAssets=3_000_000_000, TotalLiabilities=1_000_000_000)],
            Decimal("10"))

        assert result.score == 4

    def test_partial_ncav(self, make_snapshot, make_period) -> None:
        """Test NCAV of at least two thirds of market cap earns 2 points."""
        result = score_net_asset_valuation(
            [make_snapshot(2023, market_cap=1_000_000_000)],
            [make_period(2023, TotalAssets=1_700_000_000, TotalLiabilities=1_000_000_000)],
            None)

        assert result.score == 2

    def _large_cap(self, make_snapshot):
        metrics = [make_snapshot(2020 + i, earnings_per_share=2) for i in range(3)]
        metrics.append(make_snapshot(2023, earnings_per_share=2, market_cap=300_000_000_000,
                                     book_value_per_share=20))
        return metrics

    def test_below_graham_number(self, make_snapshot) -> None:
        """Test a price below sqrt(22.5 x 8 x 20) = 60 earns 3 points."""
        result = score_net_asset_valuation(self._large_cap(make_snapshot), [], Decimal("50"))

        assert result.score == 3
        assert "Graham Number ($60.00)" in result.details[-1]

    def test_above_graham_number(self, make_snapshot) -> None:
        """Test a price above the Graham Number earns 1 point."""
        result = score_net_asset_valuation(self._large_cap(make_snapshot), [], Decimal("70"))

        assert result.score == 1

    def test_missing_market_cap(self, make_snapshot) -> None:
        """Test a missing market cap is insufficient."""
        result = score_net_asset_valuation([make_snapshot(2023, earnings_per_share=1)], [], None)

        assert result.is_insufficient
