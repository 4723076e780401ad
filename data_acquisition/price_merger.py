"""
Price Merger - fills gaps in a primary price series from a secondary one.
"""

from typing import List, Sequence

from utils.unified_schema import PricePoint, sort_prices


def backfill_volume(primary: Sequence[PricePoint],
                    secondary: Sequence[PricePoint]) -> List[PricePoint]:
    """
    Fill missing volume in `primary` from `secondary`, matched by date.

    Primary bars keep every other field; dates only present in `secondary`
    are not added.

    Args:
        primary: Series to complete
        secondary: Series supplying volume

    Returns:
        Oldest-first copy of the primary series
    """
    ordered = sort_prices(list(primary))
    volumes = {p.date: p.volume for p in secondary or [] if p.volume is not None}
    if not volumes:
        return ordered

    merged = []
    for point in ordered:
        if point.volume is None and point.date in volumes:
            point = point.model_copy(update={'volume': volumes[point.date]})
        merged.append(point)
    return merged
