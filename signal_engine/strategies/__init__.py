"""
Strategies module - declarative strategy descriptors, the built-in catalog
and the generic engine that runs them.
"""

from .descriptor import CategorySpec, StrategyDescriptor
from .catalog import BUILTIN_STRATEGIES
from .registry import StrategyRegistry, registry
from .engine import CategoryBreakdown, StrategyEngine, StrategyReport

__all__ = [
    'BUILTIN_STRATEGIES',
    'CategoryBreakdown',
    'CategorySpec',
    'StrategyDescriptor',
    'StrategyEngine',
    'StrategyRegistry',
    'StrategyReport',
    'registry',
]
