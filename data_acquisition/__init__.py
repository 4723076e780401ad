"""
Data Acquisition Module / 数据获取模块

Supplies per-ticker fundamentals, metrics, prices, news and insider trades
to the signal engine through the MarketDataProvider interface.
该模块通过 MarketDataProvider 接口为信号引擎提供数据。

Main Entry Points / 主要入口点:
    - MarketDataProvider: provider interface / 数据提供者接口
    - InMemoryDataProvider: dict-backed provider / 内存数据提供者
    - JsonDirectoryProvider: per-ticker JSON fixtures / JSON 目录数据提供者
    - backfill_volume: fill missing volume from a second series / 成交量补全
"""

from .base_provider import MarketDataProvider, TickerDataProvider
from .memory_provider import InMemoryDataProvider
from .json_provider import JsonDirectoryProvider
from .price_merger import backfill_volume

__all__ = [
    'MarketDataProvider',
    'TickerDataProvider',
    'InMemoryDataProvider',
    'JsonDirectoryProvider',
    'backfill_volume',
]
