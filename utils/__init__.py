"""
Utilities module for the Financial Signal Engine.

=== 开发者必读 / DEVELOPER GUIDE ===

本目录包含项目的核心基础设施和通用工具。

--- 常用工具速查 (Quick Reference) ---

1. 数值处理 (numeric_utils.py) ★ 最常用
   from utils.numeric_utils import to_decimal, safe_divide, growth_rate, safe_format
   - to_decimal(value)           清洗数值为 Decimal(NaN/Inf/None → None)
   - safe_divide(a, b)           安全除法(除零保护)
   - growth_rate(a, b)           增长率 (b - a) / |a|, a 为零时返回 None
   - safe_format(val, ".2f")     安全格式化(无效值→"N/A")

2. 日志 (logger.py)
   from utils.logger import setup_logger, resolve_logger
   - logger = setup_logger('module_name')
   - resolve_logger(logger, 'name')  组件注入的 logger, 未注入时使用默认 logger
   - LoggingContext / set_logging_mode: 独立运行、编排运行、静默三种模式

3. 数据模型 (unified_schema.py)
   from utils.unified_schema import TickerData, MetricsSnapshot, FundamentalPeriod, LineItem
   - LineItem.parse(key)         行项目键解析(大小写/分隔符不敏感, 未知键报错)

4. 异常 (exceptions.py)
   from utils.exceptions import DataUnavailableError
   - 数据源无法提供某个 ticker 时抛出, 由 workflow 按 ticker 捕获

=== 注意事项 ===
- 金额计算一律使用 Decimal, 不要裸用 float 除法
- 新增行项目时, 必须同步更新 LineItem 并提升 LINE_ITEM_SCHEMA_VERSION
- 日志统一用 setup_logger()/resolve_logger(), 不要用 print() 做调试输出
"""

from .logger import setup_logger, resolve_logger, LoggingContext, set_logging_mode, get_logging_mode
from .numeric_utils import to_decimal, safe_divide, growth_rate, safe_format, is_valid_number
from .exceptions import SignalEngineError, DataUnavailableError

__all__ = [
    'setup_logger',
    'resolve_logger',
    'LoggingContext',
    'set_logging_mode',
    'get_logging_mode',
    'to_decimal',
    'safe_divide',
    'growth_rate',
    'safe_format',
    'is_valid_number',
    'SignalEngineError',
    'DataUnavailableError',
]
