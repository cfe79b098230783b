from __future__ import annotations

import dataclasses
import math
from typing import Any, Callable, Iterable, Mapping, Sequence

from comps.data_models import Listing, RawRecord


MISSING_SELLER = "—"

# Ordered accessor paths per canonical field. The first path yielding a
# usable value wins; dotted paths descend into nested mappings.
FIELD_FALLBACKS: dict[str, tuple[str, ...]] = {
    "id": ("id", "vin"),
    "vin": ("vin",),
    "seller_name": ("seller_name", "dealer.name"),
    "price": ("price", "build.price", "offer_price"),
    "miles": ("miles", "build.mileage"),
    "days_on_market": ("dom", "days_on_market"),
    "distance_miles": ("distance", "distance_miles", "dealer.distance"),
    "city": ("dealer.city", "city"),
    "state": ("dealer.state", "state"),
    "detail_url": ("vdp_url", "deeplink", "url"),
}


def _lookup(raw: Mapping[str, Any], path: str) -> Any:
    node: Any = raw
    for part in path.split("."):
        if not isinstance(node, Mapping):
            return None
        node = node.get(part)
    return node


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        cleaned = value.strip().replace(",", "").replace("$", "")
        if not cleaned:
            return None
        value = cleaned
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _nonzero_float(value: Any) -> float | None:
    result = _to_float(value)
    return result if result else None


def _to_int(value: Any) -> int | None:
    result = _to_float(value)
    return None if result is None else int(result)


def _to_text(value: Any) -> str | None:
    if value is None or isinstance(value, (Mapping, list, tuple)):
        return None
    text = str(value).strip()
    return text or None


def _first(raw: Mapping[str, Any], paths: Sequence[str], coerce: Callable[[Any], Any]) -> Any:
    for path in paths:
        value = coerce(_lookup(raw, path))
        if value is not None:
            return value
    return None


def normalize(raw: RawRecord, index: int) -> Listing:
    """Map one provider record onto the canonical listing shape.

    Each field walks ``FIELD_FALLBACKS`` in order. Missing numbers stay
    ``None`` so callers can tell "no data" from zero. ``id`` falls back to
    the VIN and then to the positional ``index`` within the batch.
    """
    record_id = _first(raw, FIELD_FALLBACKS["id"], _to_text)
    return Listing(
        id=record_id if record_id is not None else str(index),
        vin=_first(raw, FIELD_FALLBACKS["vin"], _to_text),
        seller_name=_first(raw, FIELD_FALLBACKS["seller_name"], _to_text) or MISSING_SELLER,
        price=_first(raw, FIELD_FALLBACKS["price"], _nonzero_float),
        miles=_first(raw, FIELD_FALLBACKS["miles"], _nonzero_float),
        days_on_market=_first(raw, FIELD_FALLBACKS["days_on_market"], _to_int),
        distance_miles=_first(raw, FIELD_FALLBACKS["distance_miles"], _to_float),
        city=_first(raw, FIELD_FALLBACKS["city"], _to_text) or "",
        state=_first(raw, FIELD_FALLBACKS["state"], _to_text) or "",
        detail_url=_first(raw, FIELD_FALLBACKS["detail_url"], _to_text) or "",
    )


def _unique_id(base: str, index: int, issued: set[str]) -> str:
    candidate = f"{base}-{index}"
    suffix = 0
    while candidate in issued:
        suffix += 1
        candidate = f"{base}-{index}-{suffix}"
    return candidate


def normalize_batch(raw_records: Iterable[RawRecord]) -> list[Listing]:
    """Normalize one provider batch, keeping ids unique within it.

    A repeated id (a provider id reused, two records sharing a VIN, or a
    positional fallback that matches an earlier id) becomes
    ``"{id}-{index}"``.
    """
    listings: list[Listing] = []
    issued: set[str] = set()
    for i, raw in enumerate(raw_records):
        listing = normalize(raw, i)
        if listing.id in issued:
            listing = dataclasses.replace(listing, id=_unique_id(listing.id, i, issued))
        issued.add(listing.id)
        listings.append(listing)
    return listings


def extract_records(payload: Any) -> list[RawRecord]:
    """Pull the listing array out of a provider response body."""
    if not isinstance(payload, Mapping):
        return []
    rows = payload.get("listings") or payload.get("results") or []
    if not isinstance(rows, list):
        return []
    return [row for row in rows if isinstance(row, Mapping)]
