"""
Signals module - score aggregation and signal mapping.
"""

from .aggregator import AggregateResult, SignalAggregator, aggregate, map_signal, validate_weights

__all__ = ['AggregateResult', 'SignalAggregator', 'aggregate', 'map_signal', 'validate_weights']
