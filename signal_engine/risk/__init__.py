"""
Risk module - per-ticker position limits.
"""

from .position_sizer import PositionSizer

__all__ = ['PositionSizer']
