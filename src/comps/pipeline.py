from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from comps.config import PipelineConfig
from comps.data_models import FilterConstraints, HistogramBucket, Listing, OfferSuggestion, PriceStatistics, SortSpec
from comps.filtering import filter_listings
from comps.histogram import build_histogram
from comps.offer import build_offer
from comps.sorting import sort_listings
from comps.statistics import compute_statistics


@dataclass(frozen=True)
class PipelineParams:
    constraints: FilterConstraints = field(default_factory=FilterConstraints)
    sort: SortSpec = field(default_factory=SortSpec)
    target_margin_percent: float = 10.0
    bucket_count: int = 10

    @classmethod
    def from_config(cls, config: PipelineConfig) -> PipelineParams:
        return cls(
            constraints=FilterConstraints(
                max_days_on_market=config.default_max_days_on_market,
                max_miles=config.default_max_miles,
            ),
            target_margin_percent=config.default_target_margin_percent,
            bucket_count=config.histogram_buckets,
        )


@dataclass(frozen=True)
class PipelineResult:
    filtered: list[Listing]
    statistics: PriceStatistics | None
    histogram: list[HistogramBucket]
    offer: OfferSuggestion | None
    view: list[Listing]


def run_pipeline(listings: Sequence[Listing], params: PipelineParams) -> PipelineResult:
    """Filter, aggregate and sort one working set.

    Everything is recomputed from ``listings`` on each call; the input is
    never modified.
    """
    filtered = filter_listings(listings, params.constraints)
    stats = compute_statistics(filtered)
    return PipelineResult(
        filtered=filtered,
        statistics=stats,
        histogram=build_histogram(filtered, params.bucket_count),
        offer=build_offer(stats, params.target_margin_percent),
        view=sort_listings(filtered, params.sort),
    )
