"""
Numeric Utilities - Centralized numeric value handling.

Provides standardized functions for:
1. Cleaning numeric values into Decimal (handling NaN/Inf/None)
2. Null-safe division and growth
3. Safe formatting for score details

Monetary arithmetic runs on Decimal so a ten-year projection does not drift
at the cent level. Every helper returns None instead of NaN/Inf.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional


def is_valid_number(value: Any) -> bool:
    """
    Check if a value is a valid, finite number.

    Examples:
        >>> is_valid_number(3.14)
        True
        >>> is_valid_number(float('nan'))
        False
        >>> is_valid_number(None)
        False
    """
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    try:
        float_val = float(value)
        return not (math.isnan(float_val) or math.isinf(float_val))
    except (ValueError, TypeError):
        return False


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a raw value into a finite Decimal, or None.

    Floats go through str() so 0.1 becomes Decimal('0.1') rather than its
    binary expansion.

    Examples:
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal("42.5")
        Decimal('42.5')
        >>> to_decimal(float('inf')) is None
        True
    """
    if not is_valid_number(value):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return None


def safe_divide(numerator: Any, denominator: Any) -> Optional[Decimal]:
    """
    Divide two values, returning None when either is missing or the
    denominator is zero.

    Examples:
        >>> safe_divide(10, 4)
        Decimal('2.5')
        >>> safe_divide(1, 0) is None
        True
    """
    num = to_decimal(numerator)
    den = to_decimal(denominator)
    if num is None or den is None or den == 0:
        return None
    return num / den


def growth_rate(initial: Any, final: Any) -> Optional[Decimal]:
    """
    Growth from `initial` to `final` as (final - initial) / |initial|.

    Undefined (None) when initial is zero or either value is missing.

    Examples:
        >>> growth_rate(1.0, 1.5)
        Decimal('0.5')
        >>> growth_rate(-2, -1)
        Decimal('0.5')
        >>> growth_rate(0, 5) is None
        True
    """
    start = to_decimal(initial)
    end = to_decimal(final)
    if start is None or end is None or start == 0:
        return None
    return (end - start) / abs(start)


def series_growth(values: List[Decimal]) -> Optional[Decimal]:
    """Growth from the first to the last value of an oldest-first series."""
    if len(values) < 2:
        return None
    return growth_rate(values[0], values[-1])


def mean(values: Iterable[Decimal]) -> Optional[Decimal]:
    """Arithmetic mean of Decimals; None for an empty input."""
    items = list(values)
    if not items:
        return None
    return sum(items, Decimal(0)) / len(items)


def safe_format(
    value: Any,
    format_spec: str = ".2f",
    default: str = "N/A",
) -> str:
    """
    Safely format a numeric value for score details.

    Examples:
        >>> safe_format(0.1234, ".1%")
        '12.3%'
        >>> safe_format(1234.5, ",.0f")
        '1,234'
        >>> safe_format(None)
        'N/A'
    """
    cleaned = to_decimal(value)
    if cleaned is None:
        return default
    try:
        return format(cleaned, format_spec)
    except (ValueError, TypeError):
        return str(cleaned)
