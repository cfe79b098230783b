from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PipelineConfig:
    histogram_buckets: int = 10
    max_histogram_buckets: int = 100
    sample_size: int = 36
    default_zip: str = "02141"
    default_radius: int = 150
    radius_range: tuple[int, int] = (10, 500)
    default_max_days_on_market: int = 120
    max_days_on_market_range: tuple[int, int] = (0, 365)
    default_max_miles: int = 200_000
    max_miles_range: tuple[int, int] = (0, 250_000)
    default_target_margin_percent: float = 10.0
    target_margin_range: tuple[float, float] = (0.0, 100.0)
    export_filename_prefix: str = "marketcheck_comps"
