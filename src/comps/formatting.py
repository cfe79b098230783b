from __future__ import annotations

import math
from typing import Any


PLACEHOLDER = "—"


def round_half_up(value: float) -> int:
    # Halves round toward +inf, not to even.
    return int(math.floor(value + 0.5))


def format_usd(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return PLACEHOLDER
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return PLACEHOLDER
    if not math.isfinite(amount):
        return PLACEHOLDER
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"
