"""
In-memory provider for tests and embedding.
"""

from typing import Dict, Iterable, Optional

from utils.exceptions import DataUnavailableError
from utils.unified_schema import TickerData
from .base_provider import TickerDataProvider


class InMemoryDataProvider(TickerDataProvider):
    """Serves TickerData documents held in a dict keyed by ticker."""

    def __init__(self, data: Optional[Iterable[TickerData]] = None):
        self._data: Dict[str, TickerData] = {}
        for item in data or []:
            self.add(item)

    def add(self, data: TickerData) -> None:
        self._data[data.ticker.upper()] = data

    def tickers(self):
        return sorted(self._data)

    def _load(self, ticker: str) -> TickerData:
        try:
            return self._data[ticker.upper()]
        except KeyError:
            raise DataUnavailableError(ticker, "ticker not loaded in memory") from None
