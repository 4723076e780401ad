"""
Base Provider - protocol for all market data providers.

Providers return raw series in any order; consumers sort. A provider that
cannot serve a ticker raises DataUnavailableError, which the workflow
catches per ticker.

基础数据提供者 - 所有市场数据提供者的通用协议。
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional

from utils.unified_schema import (
    FundamentalPeriod, InsiderTrade, MetricsSnapshot, NewsSentiment, PricePoint, TickerData, to_utc,
)


class MarketDataProvider(ABC):
    """
    Abstract base class for market data providers.
    Enforces the data surface the strategies consume.
    """

    @abstractmethod
    def get_fundamentals(self, ticker: str, as_of: Optional[datetime] = None,
                         period: str = "annual", limit: int = 10) -> List[FundamentalPeriod]:
        """Fundamental line items per reporting period."""
        pass

    @abstractmethod
    def get_metrics(self, ticker: str, as_of: Optional[datetime] = None,
                    period: str = "annual", limit: int = 10) -> List[MetricsSnapshot]:
        """Derived metrics snapshots per reporting period."""
        pass

    @abstractmethod
    def get_prices(self, ticker: str, start: Optional[date] = None,
                   end: Optional[date] = None) -> List[PricePoint]:
        """Daily bars between start and end, inclusive."""
        pass

    @abstractmethod
    def get_company_news(self, ticker: str, as_of: Optional[datetime] = None,
                         limit: int = 50) -> List[NewsSentiment]:
        """News items with per-ticker sentiment."""
        pass

    @abstractmethod
    def get_insider_trades(self, ticker: str, as_of: Optional[datetime] = None,
                           limit: int = 100) -> List[InsiderTrade]:
        """Insider transactions."""
        pass

    def load_ticker(self, ticker: str, as_of: Optional[datetime] = None,
                    period: str = "annual", limit: int = 10,
                    start: Optional[date] = None) -> TickerData:
        """
        Fetch every series for one ticker.

        Raises:
            DataUnavailableError: if the provider cannot serve the ticker
        """
        return TickerData(
            ticker=ticker,
            as_of=as_of,
            fundamentals=self.get_fundamentals(ticker, as_of, period, limit),
            metrics=self.get_metrics(ticker, as_of, period, limit),
            prices=self.get_prices(ticker, start, as_of.date() if as_of else None),
            news=self.get_company_news(ticker, as_of),
            insider_trades=self.get_insider_trades(ticker, as_of),
        )


def _cutoff(as_of: Optional[datetime]) -> Optional[date]:
    return as_of.date() if as_of else None


class TickerDataProvider(MarketDataProvider):
    """
    Provider backed by complete TickerData documents.

    Subclasses implement `_load(ticker)`; filtering by date and limit is
    shared here.
    """

    @abstractmethod
    def _load(self, ticker: str) -> TickerData:
        """Return the full document for a ticker or raise DataUnavailableError."""
        pass

    def get_fundamentals(self, ticker, as_of=None, period="annual", limit=10):
        cutoff = _cutoff(as_of)
        periods = [p for p in self._load(ticker).periods()
                   if p.period == period and (cutoff is None or p.report_date <= cutoff)]
        return periods[-limit:] if limit else periods

    def get_metrics(self, ticker, as_of=None, period="annual", limit=10):
        cutoff = _cutoff(as_of)
        snapshots = [m for m in self._load(ticker).snapshots()
                     if m.period == period and (cutoff is None or m.report_date <= cutoff)]
        return snapshots[-limit:] if limit else snapshots

    def get_prices(self, ticker, start=None, end=None):
        return [p for p in self._load(ticker).price_series()
                if (start is None or p.date >= start) and (end is None or p.date <= end)]

    def get_company_news(self, ticker, as_of=None, limit=50):
        news = self._load(ticker).news
        if as_of is not None:
            news = [n for n in news
                    if n.published_at is None or to_utc(n.published_at) <= to_utc(as_of)]
        return list(news)[:limit]

    def get_insider_trades(self, ticker, as_of=None, limit=100):
        cutoff = _cutoff(as_of)
        trades = [t for t in self._load(ticker).insider_trades
                  if cutoff is None or t.transaction_date is None or t.transaction_date <= cutoff]
        return trades[:limit]
