"""
JSON Directory Provider.

Reads one `<TICKER>.json` document per ticker from a directory. The files
are read-only input fixtures, not a cache: nothing is ever written back.

Expected document shape (all keys optional):
    {
      "ticker": "AAPL",
      "schema_version": 2,
      "fundamentals": [{"report_date": "2023-12-31", "line_items": {"TotalRevenue": 1.0e9}}],
      "metrics": [{"report_date": "2023-12-31", "market_cap": 3.0e12}],
      "prices": [{"date": "2024-01-02", "close": 185.6, "volume": 1000}],
      "news": [...],
      "insider_trades": [...]
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from utils.exceptions import DataUnavailableError
from utils.logger import resolve_logger
from utils.unified_schema import LINE_ITEM_SCHEMA_VERSION, TickerData
from .base_provider import TickerDataProvider


class JsonDirectoryProvider(TickerDataProvider):
    """Provider reading per-ticker JSON documents from a directory."""

    def __init__(self, directory: Union[str, Path], logger: Optional[logging.Logger] = None):
        self.directory = Path(directory)
        self.logger = resolve_logger(logger, 'json_provider')
        self._documents: Dict[str, TickerData] = {}

    def path_for(self, ticker: str) -> Path:
        return self.directory / f"{ticker.upper()}.json"

    def available_tickers(self) -> List[str]:
        if not self.directory.is_dir():
            return []
        return sorted(p.stem.upper() for p in self.directory.glob("*.json"))

    @staticmethod
    def _with_ticker(ticker: str, raw: Dict[str, Any]) -> Dict[str, Any]:
        """Fill the ticker into nested records that omit it."""
        raw = dict(raw)
        raw.setdefault('ticker', ticker)
        for key in ('fundamentals', 'metrics', 'insider_trades'):
            records = raw.get(key) or []
            if not isinstance(records, list):
                continue
            # Non-object records are left for validation to reject
            raw[key] = [{'ticker': ticker, **record} if isinstance(record, dict) else record
                        for record in records]
        return raw

    def _load(self, ticker: str) -> TickerData:
        key = ticker.upper()
        if key in self._documents:
            return self._documents[key]

        path = self.path_for(key)
        if not path.is_file():
            raise DataUnavailableError(ticker, f"no data file at {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            self.logger.error(f"Failed to read {path}: {e}")
            raise DataUnavailableError(ticker, f"unreadable data file: {e}") from e

        if not isinstance(raw, dict):
            raise DataUnavailableError(ticker, "data file is not a JSON object")

        version = raw.pop('schema_version', LINE_ITEM_SCHEMA_VERSION)
        if version != LINE_ITEM_SCHEMA_VERSION:
            self.logger.error(f"{path} uses line item schema v{version}, expected v{LINE_ITEM_SCHEMA_VERSION}")
            raise DataUnavailableError(ticker, f"unsupported schema version: {version}")

        try:
            document = TickerData.model_validate(self._with_ticker(key, raw))
        except ValidationError as e:
            self.logger.error(f"Invalid data in {path}: {e.error_count()} validation errors")
            raise DataUnavailableError(ticker, f"invalid data file: {e.errors()[0]['msg']}") from e

        self.logger.debug(f"Loaded {key} from {path}")
        self._documents[key] = document
        return document
