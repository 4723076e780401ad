"""Tests for the batch trading workflow."""

from decimal import Decimal

import pytest

from data_acquisition import InMemoryDataProvider, JsonDirectoryProvider
from signal_engine.workflow import TradingWorkflow
from utils.unified_schema import Portfolio


class TestTradingWorkflow:
    """Tests for per-ticker orchestration."""

    def test_missing_ticker_is_reported_and_batch_continues(self, graham_ticker_data) -> None:
        """Test a ticker with no data gets neutral reports while others are scored."""
        workflow = TradingWorkflow(InMemoryDataProvider([graham_ticker_data]), strategies=['ben_graham'])

        result = workflow.run(["AAPL", "ZZZZ"], portfolio=Portfolio(cash=Decimal(100000)))

        assert result.reports["AAPL"]["ben_graham"].signal.signal == "bullish"
        missing = result.reports["ZZZZ"]["ben_graham"]
        assert missing.source == "unscored"
        assert missing.signal.signal == "neutral"
        assert missing.signal.confidence == 0
        assert missing.failure_reason == "ticker not loaded in memory"
        assert list(result.risk) == ["AAPL"]
        assert result.risk["AAPL"].remaining_position_limit == Decimal(20000)

    def test_risk_pass_needs_portfolio(self, graham_ticker_data) -> None:
        """Test no portfolio means no risk assessments."""
        workflow = TradingWorkflow(InMemoryDataProvider([graham_ticker_data]), strategies=['ben_graham'])

        assert workflow.run(["AAPL"]).risk == {}

    def test_defaults_to_every_strategy(self, graham_ticker_data) -> None:
        """Test all registered strategies run when none are selected."""
        workflow = TradingWorkflow(InMemoryDataProvider([graham_ticker_data]))

        result = workflow.run(["AAPL"])

        assert len(result.reports["AAPL"]) == 6
        assert len(result.signals()) == 6

    def test_tickers_are_normalized(self, graham_ticker_data) -> None:
        """Test tickers are stripped, upper-cased and blanks dropped."""
        workflow = TradingWorkflow(InMemoryDataProvider([graham_ticker_data]), strategies=['ben_graham'])

        result = workflow.run([" aapl ", ""])

        assert list(result.reports) == ["AAPL"]

    def test_unknown_strategy(self, graham_ticker_data) -> None:
        """Test an unknown strategy key fails at construction."""
        with pytest.raises(ValueError, match="Unknown strategy"):
            TradingWorkflow(InMemoryDataProvider([graham_ticker_data]), strategies=['nope'])

    @pytest.mark.parametrize("raw", [b'{"ticker": "\xff\xfe"}', b'{"metrics": [1, 2]}'])
    def test_bad_data_file_is_unscored(self, tmp_path, raw) -> None:
        """Test an unreadable or malformed file leaves the rest of the batch running."""
        (tmp_path / "BAD.json").write_bytes(raw)
        workflow = TradingWorkflow(JsonDirectoryProvider(tmp_path), strategies=['ben_graham'])

        result = workflow.run(["BAD", "ZZZZ"])

        assert result.reports["BAD"]["ben_graham"].source == "unscored"
        assert result.reports["ZZZZ"]["ben_graham"].source == "unscored"
