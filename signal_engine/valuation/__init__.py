"""
Valuation Module
Risk-tiered discounted cash flow valuation.
"""

from .base_model import BaseValuationModel
from .dcf_model import (
    DCFAssumptions,
    DCFModel,
    DCFProjection,
    ValuationFailure,
    ValuationSummary,
    exact_power,
)

__all__ = [
    'BaseValuationModel',
    'DCFAssumptions',
    'DCFModel',
    'DCFProjection',
    'ValuationFailure',
    'ValuationSummary',
    'exact_power',
]
