from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from comps.data_models import RawRecord
from comps.normalization import extract_records
from comps.sample_data import generate_sample_records

logger = logging.getLogger(__name__)


class DataSourceError(Exception):
    """The listings feed could not be reached or returned an unusable response."""


@dataclass(frozen=True)
class SearchQuery:
    vin: str = ""
    year: str = ""
    make: str = ""
    model: str = ""
    trim: str = ""
    zip: str = "02141"
    radius: int = 150
    max_days_on_market: int = 120
    max_miles: int = 200_000


class ListingSource(Protocol):
    async def fetch(self, query: SearchQuery) -> list[RawRecord]: ...


def build_search_params(query: SearchQuery, api_key: str) -> dict[str, str]:
    return {
        "api_key": api_key,
        "year": query.year or "",
        "make": query.make or "",
        "model": query.model or "",
        "trim": query.trim or "",
        "vins": query.vin or "",
        "zip": query.zip or "",
        "radius": str(query.radius),
        "dom_max": str(query.max_days_on_market),
        "miles_max": str(query.max_miles),
        "car_type": "used",
        "stats": "true",
    }


class MarketCheckClient:
    """Async client for the MarketCheck active used-car listings search.

    Endpoint: GET {base_url}/search/car/active
    Response shapes vary by plan; records are read from ``listings`` or
    ``results``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://marketcheck-prod.apigee.net/v2",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def search_url(self) -> str:
        return f"{self.base_url}/search/car/active"

    async def fetch(self, query: SearchQuery) -> list[RawRecord]:
        params = build_search_params(query, self.api_key)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(self.search_url(), params=params, headers={"Accept": "application/json"})
                resp.raise_for_status()
            payload: Any = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("MarketCheck search returned HTTP %s", exc.response.status_code)
            raise DataSourceError(f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning("MarketCheck search failed: %s", exc)
            raise DataSourceError(str(exc) or exc.__class__.__name__) from exc
        except ValueError as exc:
            logger.warning("MarketCheck search returned a non-JSON body")
            raise DataSourceError("invalid JSON response") from exc

        records = extract_records(payload)
        logger.info("MarketCheck search returned %d records", len(records))
        return records


class SampleDataSource:
    """Serves generated records in place of the live feed."""

    def __init__(self, count: int = 36, seed: int | None = None) -> None:
        self.count = count
        self.seed = seed

    async def fetch(self, query: SearchQuery) -> list[RawRecord]:
        records = generate_sample_records(self.count, seed=self.seed)
        logger.info("Serving %d sample records", len(records))
        return records


def build_listing_source(settings: Any) -> ListingSource:
    if settings.use_sample_data:
        return SampleDataSource(count=settings.sample_size, seed=settings.sample_seed)
    return MarketCheckClient(
        api_key=settings.marketcheck_api_key,
        base_url=settings.marketcheck_base_url,
        timeout=settings.marketcheck_timeout_seconds,
    )
