from __future__ import annotations

import random
from typing import Any


SELLERS = ("Auto Galaxy", "Prime Motors", "City Cars", "EZ Deals")
CITIES = ("Boston", "Providence", "Hartford", "Nashua")
STATES = ("MA", "RI", "CT", "NH")
VIN_PREFIX = "1HGBH41JXMN"


def generate_sample_records(count: int = 36, seed: int | None = None) -> list[dict[str, Any]]:
    """Loosely realistic provider-shaped records for previews without an API key."""
    rng = random.Random(seed)
    records = []
    for i in range(count):
        records.append(
            {
                "id": f"demo-{i + 1}",
                "vin": f"{VIN_PREFIX}{str(100000 + i)[-6:]}",
                "seller_name": SELLERS[i % 4],
                "price": int(18000 + rng.random() * 22000),
                "miles": int(10000 + rng.random() * 60000),
                "dom": int(rng.random() * 90),
                "distance_miles": int(5 + rng.random() * 150),
                "city": CITIES[i % 4],
                "state": STATES[i % 4],
                "vdp_url": "https://example.com/listing",
            }
        )
    return records
