"""
Series helpers shared by the scorers.

Every helper sorts its input oldest-first and drops missing values, so
scorers never depend on the order a provider returned records in.
"""

from decimal import Decimal
from typing import List, Optional, Sequence

from utils.numeric_utils import mean
from utils.unified_schema import (
    FundamentalPeriod, LineItem, MetricsSnapshot, sort_metrics, sort_periods,
)


def metric_values(metrics: Sequence[MetricsSnapshot], attr: str) -> List[Decimal]:
    """Oldest-first non-null values of one MetricsSnapshot attribute."""
    values = (getattr(m, attr) for m in sort_metrics(list(metrics)))
    return [v for v in values if v is not None]


def line_item_values(periods: Sequence[FundamentalPeriod], item: LineItem) -> List[Decimal]:
    """Oldest-first non-null values of one line item."""
    values = (p.get(item) for p in sort_periods(list(periods)))
    return [v for v in values if v is not None]


def revenue_series(metrics: Sequence[MetricsSnapshot],
                   periods: Sequence[FundamentalPeriod]) -> List[Decimal]:
    """Revenue from metrics, falling back to the TotalRevenue line item."""
    revenues = metric_values(metrics, 'revenue')
    if len(revenues) >= 2:
        return revenues
    from_items = line_item_values(periods, LineItem.TOTAL_REVENUE)
    return from_items if len(from_items) > len(revenues) else revenues


def latest_value(metrics: Sequence[MetricsSnapshot], attr: str) -> Optional[Decimal]:
    values = metric_values(metrics, attr)
    return values[-1] if values else None


def is_majority(count: int, total: int) -> bool:
    """Strict majority: count >= total // 2 + 1."""
    return total > 0 and count >= total // 2 + 1


def mean_absolute_deviation(values: Sequence[Decimal]) -> Optional[Decimal]:
    avg = mean(values)
    if avg is None:
        return None
    return mean(abs(v - avg) for v in values)


def period_growth_rates(values: Sequence[Decimal]) -> List[Decimal]:
    """Step-by-step growth (newer / older - 1), skipping zero bases."""
    rates = []
    for older, newer in zip(values, values[1:]):
        if older == 0:
            continue
        rates.append(newer / older - 1)
    return rates
