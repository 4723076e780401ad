"""Tests for the quality scorers."""

from signal_engine.scoring import (
    score_business_quality,
    score_consistency,
    score_financial_discipline,
    score_fundamentals,
    score_management_quality,
    score_moat_strength,
    score_predictability,
)
from utils.unified_schema import InsiderTrade, RiskLevel


class TestBusinessQuality:
    """Tests for revenue, margin, FCF and ROE checks."""

    def test_full_marks(self, make_snapshot) -> None:
        """Test a doubling, profitable, high-ROE business scores 7."""
        metrics = [
            make_snapshot(2022, revenue=100, operating_margin=0.2, operating_cash_flow=50,
                          capital_expenditure=10, return_on_equity=0.1),
            make_snapshot(2023, revenue=200, operating_margin=0.2, operating_cash_flow=50,
                          capital_expenditure=10, return_on_equity=0.2),
        ]

        result = score_business_quality(metrics)

        assert result.score == 7
        assert result.max_score == 7

    def test_revenue_falls_back_to_line_items(self, make_snapshot, make_period) -> None:
        """Test TotalRevenue line items are used when metrics lack revenue."""
        metrics = [make_snapshot(2022), make_snapshot(2023)]
        periods = [make_period(2022, TotalRevenue=100), make_period(2023, TotalRevenue=120)]

        result = score_business_quality(metrics, periods)

        assert result.score == 1
        assert "Revenue grew by 20.0% over the period." in result.details

    def test_single_period_is_insufficient(self, make_snapshot) -> None:
        """Test fewer than two periods is insufficient."""
        assert score_business_quality([make_snapshot(2023, revenue=1)]).is_insufficient


class TestFinancialDiscipline:
    """Tests for leverage, dividends and buybacks."""

    def test_full_marks(self, make_snapshot) -> None:
        """Test low leverage, steady dividends and buybacks score 4."""
        metrics = [
            make_snapshot(2022, debt_to_equity=0.5, dividends_paid=-1, outstanding_shares=100),
            make_snapshot(2023, debt_to_equity=0.5, dividends_paid=-1, outstanding_shares=90),
        ]

        assert score_financial_discipline(metrics).score == 4

    def test_liabilities_to_assets_fallback(self, make_snapshot, make_period) -> None:
        """Test the balance-sheet ratio is used without debt-to-equity."""
        metrics = [make_snapshot(2022), make_snapshot(2023)]
        periods = [make_period(2022, TotalAssets=100, TotalLiabilities=40),
                   make_period(2023, TotalAssets=100, TotalLiabilities=40)]

        result = score_financial_discipline(metrics, periods)

        assert result.score == 2
        assert "Liabilities-to-assets < 50% in most periods." in result.details


class TestFundamentals:
    """Tests for the latest-snapshot fundamentals check."""

    def test_strong_fundamentals(self, make_snapshot) -> None:
        """Test every threshold met scores 7."""
        metrics = [make_snapshot(2023, return_on_equity=0.2, debt_to_equity=0.3,
                                 operating_margin=0.2, current_ratio=2)]

        assert score_fundamentals(metrics).score == 7

    def test_missing_fields(self, make_snapshot) -> None:
        """Test missing fields produce details and no points."""
        result = score_fundamentals([make_snapshot(2023)])

        assert result.score == 0
        assert "ROE data not available" in result.details

    def test_no_metrics(self) -> None:
        """Test an empty series is insufficient."""
        assert score_fundamentals([]).is_insufficient


class TestConsistency:
    """Tests for earnings consistency by risk tier."""

    def _metrics(self, make_snapshot, values):
        return [make_snapshot(2020 + i, net_income=v) for i, v in enumerate(values)]

    def test_medium_tier(self, make_snapshot) -> None:
        """Test steady growth scores 2 on the medium tier."""
        assert score_consistency(self._metrics(make_snapshot, [1, 2, 3, 4])).score == 2

    def test_low_tier(self, make_snapshot) -> None:
        """Test steady growth scores 3 on the low tier."""
        result = score_consistency(self._metrics(make_snapshot, [1, 2, 3, 4]), RiskLevel.LOW)

        assert result.score == 3

    def test_high_tier(self, make_snapshot) -> None:
        """Test total growth above 20% scores 3 on the high tier."""
        result = score_consistency(self._metrics(make_snapshot, [1, 2, 3, 4]), RiskLevel.HIGH)

        assert result.score == 3

    def test_needs_four_periods(self, make_snapshot) -> None:
        """Test three periods are insufficient."""
        assert score_consistency(self._metrics(make_snapshot, [1, 2, 3])).is_insufficient


class TestMoatStrength:
    """Tests for the scaled moat score."""

    def test_scaled_score(self, make_snapshot, make_period) -> None:
        """Test raw 8 of 9 scales to 8 of 10."""
        metrics = [make_snapshot(2021 + i, return_on_invested_capital=0.2, gross_margin=gm, goodwill=5)
                   for i, gm in enumerate([0.40, 0.42, 0.45])]
        periods = [make_period(2021 + i, CapitalExpenditures=-3, TotalRevenue=100, ResearchAndDevelopment=10)
                   for i in range(3)]

        result = score_moat_strength(metrics, periods)

        assert result.score == 8
        assert result.max_score == 10
        assert any(d.startswith("Excellent ROIC") for d in result.details)

    def test_needs_three_periods(self, make_snapshot) -> None:
        """Test two periods are insufficient."""
        assert score_moat_strength([make_snapshot(2022), make_snapshot(2023)]).is_insufficient


class TestManagementQuality:
    """Tests for capital allocation and insider conviction."""

    def _metrics(self, make_snapshot, shares=(100, 98, 96, 93, 90)):
        return [
            make_snapshot(2019 + i, net_income=100, operating_cash_flow=130, capital_expenditure=10,
                          total_debt=20, shareholder_equity=100, cash_and_equivalents=15,
                          revenue=100, outstanding_shares=s)
            for i, s in enumerate(shares)
        ]

    def test_with_insider_buying(self, make_snapshot) -> None:
        """Test raw 12 of 12 scales to 10."""
        trades = [InsiderTrade(ticker="TEST", transaction_shares=500) for _ in range(3)]

        result = score_management_quality(self._metrics(make_snapshot), insider_trades=trades)

        assert result.score == 10
        assert any("Strong insider buying" in d for d in result.details)

    def test_without_insider_data(self, make_snapshot) -> None:
        """Test raw 10 of 12 scales to 8 when insider data is absent."""
        result = score_management_quality(self._metrics(make_snapshot))

        assert result.score == 8
        assert any("skipped" in d for d in result.details)

    def test_dilution_clamps_to_zero(self, make_snapshot) -> None:
        """Test a negative raw score is clamped at zero."""
        metrics = [make_snapshot(2019 + i, outstanding_shares=s)
                   for i, s in enumerate([100, 105, 110, 120, 130])]

        result = score_management_quality(metrics)

        assert result.score == 0
        assert "Concerning dilution: Share count increased significantly" in result.details


class TestPredictability:
    """Tests for forecastability scoring."""

    def test_highly_predictable(self, make_snapshot, make_period) -> None:
        """Test steady 10% growth, stable margins and positive cash score 10."""
        revenues = [100, 110, 121, "133.1", "146.41"]
        metrics = [make_snapshot(2019 + i, revenue=r, operating_cash_flow=30, capital_expenditure=5)
                   for i, r in enumerate(revenues)]
        periods = [make_period(2019 + i, OperatingIncome=20, OperatingMargin=0.2) for i in range(5)]

        result = score_predictability(metrics, periods)

        assert result.score == 10

    def test_needs_five_periods(self, make_snapshot) -> None:
        """Test four periods are insufficient."""
        metrics = [make_snapshot(2020 + i, revenue=100) for i in range(4)]

        assert score_predictability(metrics).is_insufficient
