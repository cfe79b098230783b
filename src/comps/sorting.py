from __future__ import annotations

from typing import Iterable

from comps.data_models import Listing, SortSpec


def sort_value(listing: Listing, key: str) -> float:
    value = getattr(listing, key)
    return 0 if value is None else value


def sort_listings(listings: Iterable[Listing], spec: SortSpec) -> list[Listing]:
    # sorted() is stable in both directions, so ties keep input order.
    return sorted(
        listings,
        key=lambda listing: sort_value(listing, spec.key),
        reverse=spec.direction == "desc",
    )
