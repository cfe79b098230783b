import dataclasses

import pytest

from comps.config import PipelineConfig
from comps.data_models import FilterConstraints, Listing, SortSpec
from comps.pipeline import PipelineParams


def test_listing_is_immutable():
    listing = Listing(
        id="demo-1",
        vin="1HGBH41JXMN100000",
        seller_name="Auto Galaxy",
        price=21500.0,
        miles=35000.0,
        days_on_market=12,
        distance_miles=40.0,
        city="Boston",
        state="MA",
        detail_url="https://example.com/listing",
    )
    with pytest.raises(dataclasses.FrozenInstanceError):
        listing.price = 1.0  # type: ignore[misc]


def test_sort_spec_rejects_unknown_key_and_direction():
    with pytest.raises(ValueError):
        SortSpec(key="year")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        SortSpec(direction="sideways")  # type: ignore[arg-type]


def test_params_from_config_defaults():
    params = PipelineParams.from_config(PipelineConfig())
    assert params.constraints == FilterConstraints(max_days_on_market=120, max_miles=200_000)
    assert params.target_margin_percent == 10.0
    assert params.bucket_count == 10
    assert params.sort == SortSpec(key="price", direction="asc")
