from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from comps.data_models import Listing, PriceStatistics


def median(values: Sequence[float]) -> float | None:
    if len(values) == 0:
        return None
    ordered = np.sort(np.asarray(values, dtype=float))
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[mid])
    return float((ordered[mid - 1] + ordered[mid]) / 2)


def compute_statistics(listings: Iterable[Listing]) -> PriceStatistics | None:
    """Price spread and medians over the listings that carry a price.

    Returns ``None`` when no listing has a price. ``median_miles`` is
    ``None`` when none of them reports an odometer reading.
    """
    rows = list(listings)
    prices = np.asarray([l.price for l in rows if l.price is not None], dtype=float)
    if prices.size == 0:
        return None
    miles = [l.miles for l in rows if l.miles is not None]

    return PriceStatistics(
        min=float(np.min(prices)),
        max=float(np.max(prices)),
        mean=float(np.mean(prices)),
        median=median(prices),
        median_miles=median(miles),
        count=int(prices.size),
    )
