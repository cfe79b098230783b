from __future__ import annotations

import json
from datetime import date
from typing import Any, Iterable, Mapping, Sequence

from comps.data_models import Listing


EXPORT_FILENAME_PREFIX = "marketcheck_comps"


def _cell(value: Any) -> str:
    if value is None:
        value = ""
    elif isinstance(value, float) and value.is_integer():
        value = int(value)
    return json.dumps(value, ensure_ascii=False, default=str)


def to_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """Serialize rows to comma-delimited text with JSON-escaped cells.

    The header is the first row's keys in insertion order, encoded like any
    other cell, and every later row is written against that same key list.
    Returns ``""`` for no rows.
    """
    if not rows:
        return ""
    headers = list(rows[0].keys())
    lines = [",".join(_cell(h) for h in headers)]
    for row in rows:
        lines.append(",".join(_cell(row.get(h)) for h in headers))
    return "\n".join(lines)


def export_rows(listings: Iterable[Listing]) -> list[dict[str, Any]]:
    return [
        {
            "VIN": l.vin,
            "Seller": l.seller_name,
            "Price": l.price,
            "Miles": l.miles,
            "DOM": l.days_on_market,
            "DistanceMi": l.distance_miles,
            "City": l.city,
            "State": l.state,
            "URL": l.detail_url,
        }
        for l in listings
    ]


def export_filename(today: date, prefix: str = EXPORT_FILENAME_PREFIX) -> str:
    return f"{prefix}_{today.isoformat()}.csv"
