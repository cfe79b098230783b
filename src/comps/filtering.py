from __future__ import annotations

from typing import Iterable

from comps.data_models import FilterConstraints, Listing


def passes(listing: Listing, constraints: FilterConstraints) -> bool:
    days = listing.days_on_market or 0
    miles = listing.miles or 0
    return days <= constraints.max_days_on_market and miles <= constraints.max_miles


def filter_listings(listings: Iterable[Listing], constraints: FilterConstraints) -> list[Listing]:
    """Keep listings within the DOM and odometer ceilings, in input order."""
    return [listing for listing in listings if passes(listing, constraints)]
