from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping


RawRecord = Mapping[str, Any]
SortKey = Literal["price", "miles", "days_on_market", "distance_miles"]
SortDirection = Literal["asc", "desc"]

SORT_KEYS: tuple[str, ...] = ("price", "miles", "days_on_market", "distance_miles")
SORT_DIRECTIONS: tuple[str, ...] = ("asc", "desc")


@dataclass(frozen=True)
class Listing:
    id: str
    vin: str | None
    seller_name: str
    price: float | None
    miles: float | None
    days_on_market: int | None
    distance_miles: float | None
    city: str
    state: str
    detail_url: str


@dataclass(frozen=True)
class FilterConstraints:
    max_days_on_market: int = 120
    max_miles: int = 200_000


@dataclass(frozen=True)
class SortSpec:
    key: SortKey = "price"
    direction: SortDirection = "asc"

    def __post_init__(self) -> None:
        if self.key not in SORT_KEYS:
            raise ValueError(f"Unsupported sort key: {self.key!r}")
        if self.direction not in SORT_DIRECTIONS:
            raise ValueError(f"Unsupported sort direction: {self.direction!r}")


@dataclass(frozen=True)
class PriceStatistics:
    min: float
    max: float
    mean: float
    median: float
    median_miles: float | None
    count: int


@dataclass(frozen=True)
class HistogramBucket:
    label: str
    range_start: float
    range_end: float
    count: int


@dataclass(frozen=True)
class OfferSuggestion:
    target_margin_percent: float
    suggested_price: int
