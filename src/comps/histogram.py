from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from comps.data_models import HistogramBucket, Listing
from comps.formatting import format_usd, round_half_up


DEFAULT_BUCKETS = 10


def _bucket_positions(prices: np.ndarray, low: float, high: float, bucket_count: int) -> tuple[np.ndarray, list[float]]:
    span = high - low
    if math.isfinite(span):
        step = span / bucket_count or 1.0
        edges = [low + i * step for i in range(bucket_count + 1)]
        return np.floor((prices - low) / step), edges

    # Span exceeds the float range; measure in units of the largest magnitude.
    scale = max(abs(low), abs(high))
    fraction = (prices / scale - low / scale) / (high / scale - low / scale)
    edges = [low * (1 - i / bucket_count) + high * (i / bucket_count) for i in range(bucket_count + 1)]
    return np.floor(fraction * bucket_count), edges


def build_histogram(listings: Iterable[Listing], bucket_count: int = DEFAULT_BUCKETS) -> list[HistogramBucket]:
    """Equal-width price buckets between the lowest and highest price.

    Buckets are half-open except the last, which also takes the maximum.
    When every price is identical the width falls back to 1 so all of them
    land in the first bucket.
    """
    if bucket_count < 1:
        raise ValueError("bucket_count must be at least 1")

    prices = np.asarray([l.price for l in listings if l.price is not None], dtype=float)
    if prices.size == 0:
        return []

    low = float(np.min(prices))
    high = float(np.max(prices))
    positions, edges = _bucket_positions(prices, low, high, bucket_count)

    idx = np.clip(positions.astype(int), 0, bucket_count - 1)
    counts = np.bincount(idx, minlength=bucket_count)

    return [
        HistogramBucket(
            label=format_usd(round_half_up(edges[i])),
            range_start=edges[i],
            range_end=edges[i + 1],
            count=int(counts[i]),
        )
        for i in range(bucket_count)
    ]
