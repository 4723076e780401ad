"""Tests for score aggregation and signal mapping."""

from decimal import Decimal

import pytest

from config.analysis_config import MOMENTUM_WEIGHTS
from signal_engine.scoring import ScoreResult
from signal_engine.signals import SignalAggregator, aggregate, map_signal, validate_weights


def _score(title, score, max_score=10):
    return ScoreResult(title=title, max_score=max_score, score=score)


class TestMapSignal:
    """Tests for the 0.7 / 0.3 thresholds."""

    @pytest.mark.parametrize("total, expected", [
        ("7", "bullish"),
        ("10", "bullish"),
        ("6.99", "neutral"),
        ("3.01", "neutral"),
        ("3", "bearish"),
        ("0", "bearish"),
    ])
    def test_thresholds(self, total, expected) -> None:
        """Test both boundaries are inclusive."""
        assert map_signal(Decimal(total), Decimal(10)) == expected


class TestAggregate:
    """Tests for plain and weighted aggregation."""

    def test_plain_sum(self) -> None:
        """Test totals and maxima are summed."""
        scores = [_score("A", 4, 4), _score("B", 2, 4), _score("C", 1, 4)]

        result = aggregate(scores)

        assert result.total == Decimal(7)
        assert result.max_score == Decimal(12)
        assert result.signal == "neutral"

    def test_explicit_max(self) -> None:
        """Test an explicit maximum overrides the category sum."""
        result = aggregate([_score("A", 8, 10), _score("B", 6, 10)], max_score=20)

        assert result.signal == "bullish"

    def test_weighted(self) -> None:
        """Test weights keyed by category title."""
        scores = [
            _score("Growth & Momentum", 10),
            _score("Risk/Reward", 10),
            _score("Valuation", 5),
            _score("Sentiment", 8),
            _score("Insider Activity", 5),
        ]

        result = aggregate(scores, MOMENTUM_WEIGHTS)

        assert result.total == Decimal("8.2")
        assert result.max_score == Decimal(10)
        assert result.signal == "bullish"

    def test_missing_weight(self) -> None:
        """Test a category without a weight is rejected."""
        with pytest.raises(ValueError, match="No weight configured"):
            aggregate([_score("Unknown", 5)], MOMENTUM_WEIGHTS)


class TestValidateWeights:
    """Tests for the weight-sum check."""

    def test_float_weights_are_exact(self) -> None:
        """Test 0.1 + 0.2 + 0.7 is accepted via decimal conversion."""
        weights = validate_weights({"A": 0.1, "B": 0.2, "C": 0.7})

        assert weights["A"] == Decimal("0.1")

    def test_weights_must_sum_to_one(self) -> None:
        """Test a short sum raises."""
        with pytest.raises(ValueError, match="sum to 1"):
            validate_weights({"A": Decimal("0.5"), "B": Decimal("0.4")})

    def test_aggregator_validates_on_construction(self) -> None:
        """Test a bound aggregator checks its weights up front."""
        with pytest.raises(ValueError, match="sum to 1"):
            SignalAggregator({"A": Decimal("1.5")})
