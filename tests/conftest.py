"""Pytest configuration and fixtures."""

import json
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from utils.logger import LoggingContext, set_logging_mode
from utils.unified_schema import (
    FundamentalPeriod, InsiderTrade, MetricsSnapshot, PricePoint, TickerData,
)

TICKER = "TEST"


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Keep default component loggers quiet during the run."""
    set_logging_mode(LoggingContext.SILENT)
    yield
    set_logging_mode(LoggingContext.STANDALONE)


def snapshot(year: int, ticker: str = TICKER, **fields: Any) -> MetricsSnapshot:
    return MetricsSnapshot(ticker=ticker, report_date=date(year, 12, 31), **fields)


def period(year: int, ticker: str = TICKER, **items: Any) -> FundamentalPeriod:
    return FundamentalPeriod(ticker=ticker, report_date=date(year, 12, 31), line_items=items)


def price_series(closes: Sequence[float], start: date = date(2024, 1, 1)) -> List[PricePoint]:
    return [PricePoint(date=start + timedelta(days=i), close=c) for i, c in enumerate(closes)]


def chat_body(content: str) -> str:
    """Chat-completion response body wrapping `content`."""
    return json.dumps({"choices": [{"message": {"role": "assistant", "content": content}}]})


class FakeTransport:
    """ChatTransport double recording every POST."""

    def __init__(self, ok: bool = True, body: str = "", error: Optional[Exception] = None):
        self.ok = ok
        self.body = body
        self.error = error
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def post(self, path: str, payload: Dict[str, Any]) -> Tuple[bool, str]:
        self.calls.append((path, payload))
        if self.error is not None:
            raise self.error
        return self.ok, self.body


@pytest.fixture
def make_snapshot():
    return snapshot


@pytest.fixture
def make_period():
    return period


@pytest.fixture
def make_prices():
    return price_series


@pytest.fixture
def make_chat_body():
    return chat_body


@pytest.fixture
def fake_transport():
    return FakeTransport


@pytest.fixture
def graham_ticker_data() -> TickerData:
    """Stable EPS, strong balance sheet and a net-net market cap."""
    return TickerData(
        ticker="AAPL",
        fundamentals=[
            period(2023, ticker="AAPL", TotalCurrentAssets=200, TotalCurrentLiabilities=80,
                   TotalAssets=3000, TotalLiabilities=1000),
        ],
        metrics=[
            snapshot(2021, ticker="AAPL", earnings_per_share=1.0),
            snapshot(2022, ticker="AAPL", earnings_per_share=1.2),
            snapshot(2023, ticker="AAPL", earnings_per_share=1.5, market_cap=1000),
        ],
        prices=price_series([150.0, 152.5, 151.0], start=date(2024, 1, 2)),
        insider_trades=[InsiderTrade(ticker="AAPL", transaction_shares=100)],
    )
