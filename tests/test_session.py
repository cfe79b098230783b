import asyncio
from datetime import date

import pytest

from comps.data_models import FilterConstraints, SortSpec
from comps.pipeline import PipelineParams
from service.marketcheck import DataSourceError, SampleDataSource, SearchQuery
from service.session import ComparablesSession


class GatedSource:
    """Returns a preset batch per make once its gate is released."""

    def __init__(self, batches: dict) -> None:
        self.batches = batches
        self.gates = {make: asyncio.Event() for make in batches}

    async def fetch(self, query: SearchQuery) -> list:
        await self.gates[query.make].wait()
        return self.batches[query.make]


class FailingSource:
    async def fetch(self, query: SearchQuery) -> list:
        raise DataSourceError("HTTP 503")


@pytest.mark.asyncio
async def test_search_replaces_working_set():
    session = ComparablesSession(SampleDataSource(count=8, seed=3))
    applied = await session.search(SearchQuery())
    assert applied is True
    assert len(session.listings) == 8
    assert session.listings[0].id == "demo-1"


@pytest.mark.asyncio
async def test_stale_search_result_is_discarded():
    source = GatedSource({
        "old": [{"id": "old-1", "price": 1000}],
        "new": [{"id": "new-1", "price": 2000}, {"id": "new-2", "price": 3000}],
    })
    session = ComparablesSession(source)

    first = asyncio.create_task(session.search(SearchQuery(make="old")))
    second = asyncio.create_task(session.search(SearchQuery(make="new")))
    await asyncio.sleep(0)

    source.gates["new"].set()
    assert await second is True
    source.gates["old"].set()
    assert await first is False

    assert [l.id for l in session.listings] == ["new-1", "new-2"]
    assert session.generation == 2


@pytest.mark.asyncio
async def test_failed_search_keeps_previous_working_set():
    session = ComparablesSession(SampleDataSource(count=4, seed=9))
    await session.search(SearchQuery())
    before = session.listings

    session.source = FailingSource()
    with pytest.raises(DataSourceError):
        await session.search(SearchQuery())
    assert session.listings == before


@pytest.mark.asyncio
async def test_clear_empties_working_set():
    session = ComparablesSession(SampleDataSource(count=4, seed=9))
    await session.search(SearchQuery())
    session.clear()
    assert session.listings == ()
    assert session.view().statistics is None


@pytest.mark.asyncio
async def test_view_uses_params():
    session = ComparablesSession(SampleDataSource(count=36, seed=11))
    await session.search(SearchQuery())
    params = PipelineParams(
        constraints=FilterConstraints(max_days_on_market=365, max_miles=250_000),
        sort=SortSpec(key="miles", direction="desc"),
    )
    result = session.view(params)
    assert len(result.filtered) == 36
    miles = [l.miles for l in result.view]
    assert miles == sorted(miles, reverse=True)


@pytest.mark.asyncio
async def test_save_csv_and_copy_offer_use_injected_capabilities():
    session = ComparablesSession(SampleDataSource(count=6, seed=5))
    await session.search(SearchQuery())

    files: list[tuple[str, str]] = []
    name = session.save_csv(lambda n, t: files.append((n, t)), today=date(2025, 1, 31))
    assert name == "marketcheck_comps_2025-01-31.csv"
    assert files[0][0] == name
    assert files[0][1].startswith('"VIN","Seller","Price","Miles","DOM","DistanceMi","City","State","URL"\n')

    clipboard: list[str] = []
    text = session.copy_offer(clipboard.append)
    assert text is not None
    assert clipboard == [text]
    assert int(text) == session.view().offer.suggested_price


def test_empty_session_skips_capabilities():
    session = ComparablesSession(SampleDataSource())
    files: list = []
    clipboard: list = []
    assert session.save_csv(lambda n, t: files.append((n, t))) is None
    assert session.copy_offer(clipboard.append) is None
    assert files == [] and clipboard == []
