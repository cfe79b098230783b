from __future__ import annotations

from typing import Any, Literal

from fastapi import FastAPI, HTTPException, Query, Request, Response, status
from pydantic import BaseModel, Field

from comps.config import PipelineConfig
from comps.data_models import FilterConstraints, Listing, SortSpec
from comps.pipeline import PipelineParams
from service.logging_config import configure_logging, correlation_id, new_correlation_id
from service.marketcheck import DataSourceError, ListingSource, SearchQuery, build_listing_source
from service.session import ComparablesSession
from service.settings import ServiceSettings

LIMITS = PipelineConfig()


# ── Request / Response Models ───────────────────────────────────────

class SearchRequest(BaseModel):
    vin: str = ""
    year: str = ""
    make: str = ""
    model: str = ""
    trim: str = ""
    zip: str | None = None
    radius: int | None = Field(default=None, ge=LIMITS.radius_range[0], le=LIMITS.radius_range[1])
    max_days_on_market: int = Field(
        default=LIMITS.default_max_days_on_market,
        ge=LIMITS.max_days_on_market_range[0],
        le=LIMITS.max_days_on_market_range[1],
    )
    max_miles: int = Field(
        default=LIMITS.default_max_miles,
        ge=LIMITS.max_miles_range[0],
        le=LIMITS.max_miles_range[1],
    )


class SearchResponse(BaseModel):
    count: int
    applied: bool
    source: str


class ListingOut(BaseModel):
    id: str
    vin: str | None
    seller_name: str
    price: float | None
    miles: float | None
    days_on_market: int | None
    distance_miles: float | None
    city: str
    state: str
    detail_url: str


class StatisticsOut(BaseModel):
    min: float
    max: float
    mean: float
    median: float
    median_miles: float | None
    count: int


class BucketOut(BaseModel):
    label: str
    range_start: float
    range_end: float
    count: int


class OfferOut(BaseModel):
    target_margin_percent: float
    suggested_price: int


class CompsResponse(BaseModel):
    total: int
    filtered: int
    statistics: StatisticsOut | None
    histogram: list[BucketOut]
    offer: OfferOut | None
    listings: list[ListingOut]


class HealthResponse(BaseModel):
    status: str


def _listing_out(listing: Listing) -> ListingOut:
    return ListingOut(**vars(listing))


# ── App Factory ─────────────────────────────────────────────────────

def create_app(
    settings: ServiceSettings | None = None,
    source: ListingSource | None = None,
) -> FastAPI:
    settings = settings or ServiceSettings()
    configure_logging(level=settings.log_level, fmt=settings.log_format)

    cfg = PipelineConfig(
        default_zip=settings.default_zip,
        default_radius=settings.default_radius,
        sample_size=settings.sample_size,
    )
    source = source or build_listing_source(settings)
    source_name = "sample" if settings.use_sample_data else "marketcheck"
    session = ComparablesSession(source=source, config=cfg)
    dom_min, dom_max = cfg.max_days_on_market_range
    miles_min, miles_max = cfg.max_miles_range
    margin_min, margin_max = cfg.target_margin_range

    app = FastAPI(title="Comparable Listings API", version="0.1.0")
    app.state.session = session

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next: Any) -> Response:
        cid = request.headers.get("X-Correlation-ID") or new_correlation_id()
        correlation_id.set(cid)
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = cid
        return response

    def _params(
        max_dom: int,
        max_miles: int,
        sort_key: str,
        sort_dir: str,
        margin: float,
        buckets: int,
    ) -> PipelineParams:
        return PipelineParams(
            constraints=FilterConstraints(max_days_on_market=max_dom, max_miles=max_miles),
            sort=SortSpec(key=sort_key, direction=sort_dir),
            target_margin_percent=margin,
            bucket_count=buckets,
        )

    # ── Health ──────────────────────────────────────────────────────

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    # ── Search / Working Set ────────────────────────────────────────

    @app.post("/comps/search", response_model=SearchResponse)
    async def search(req: SearchRequest) -> SearchResponse:
        query = SearchQuery(
            vin=req.vin,
            year=req.year,
            make=req.make,
            model=req.model,
            trim=req.trim,
            zip=req.zip or cfg.default_zip,
            radius=req.radius or cfg.default_radius,
            max_days_on_market=req.max_days_on_market,
            max_miles=req.max_miles,
        )
        try:
            applied = await session.search(query)
        except DataSourceError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Error fetching comps: {exc}",
            ) from exc
        return SearchResponse(count=len(session.listings), applied=applied, source=source_name)

    @app.delete("/comps", status_code=status.HTTP_204_NO_CONTENT)
    async def clear() -> Response:
        session.clear()
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/comps", response_model=CompsResponse)
    async def comps(
        max_dom: int = Query(default=cfg.default_max_days_on_market, ge=dom_min, le=dom_max),
        max_miles: int = Query(default=cfg.default_max_miles, ge=miles_min, le=miles_max),
        sort_key: Literal["price", "miles", "days_on_market", "distance_miles"] = "price",
        sort_dir: Literal["asc", "desc"] = "asc",
        margin: float = Query(default=cfg.default_target_margin_percent, ge=margin_min, le=margin_max),
        buckets: int = Query(default=cfg.histogram_buckets, ge=1, le=cfg.max_histogram_buckets),
    ) -> CompsResponse:
        result = session.view(_params(max_dom, max_miles, sort_key, sort_dir, margin, buckets))
        return CompsResponse(
            total=len(session.listings),
            filtered=len(result.filtered),
            statistics=StatisticsOut(**vars(result.statistics)) if result.statistics else None,
            histogram=[BucketOut(**vars(b)) for b in result.histogram],
            offer=OfferOut(**vars(result.offer)) if result.offer else None,
            listings=[_listing_out(l) for l in result.view],
        )

    @app.get("/comps/export.csv")
    async def export_csv(
        max_dom: int = Query(default=cfg.default_max_days_on_market, ge=dom_min, le=dom_max),
        max_miles: int = Query(default=cfg.default_max_miles, ge=miles_min, le=miles_max),
        sort_key: Literal["price", "miles", "days_on_market", "distance_miles"] = "price",
        sort_dir: Literal["asc", "desc"] = "asc",
    ) -> Response:
        params = _params(max_dom, max_miles, sort_key, sort_dir, cfg.default_target_margin_percent, cfg.histogram_buckets)
        name, text = session.export_csv(params)
        if not text:
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return Response(
            content=text,
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{name}"'},
        )

    return app


app = create_app()
