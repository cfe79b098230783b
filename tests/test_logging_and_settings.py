import io
import json
import logging

import pytest

from service.logging_config import JSONFormatter, configure_logging, correlation_id
from service.marketcheck import SampleDataSource, SearchQuery
from service.session import ComparablesSession
from service.settings import ServiceSettings


# ── Logging ─────────────────────────────────────────────────────────


def test_json_formatter_includes_correlation_id():
    correlation_id.set("trace-42")
    record = logging.LogRecord("comps", logging.WARNING, "", 0, "search failed: %s", ("HTTP 503",), None)
    parsed = json.loads(JSONFormatter().format(record))
    assert parsed["message"] == "search failed: HTTP 503"
    assert parsed["level"] == "WARNING"
    assert parsed["correlation_id"] == "trace-42"
    assert "timestamp" in parsed
    correlation_id.set("")


def test_configure_logging_level():
    configure_logging(level="DEBUG", fmt="text")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING


def test_configure_logging_json_stream_stamps_correlation_id():
    stream = io.StringIO()
    configure_logging(level="INFO", fmt="json", stream=stream)
    correlation_id.set("req-7")
    logging.getLogger("comps.test").info("hello", extra={"extra_data": {"count": 3}})
    correlation_id.set("")

    parsed = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert parsed["message"] == "hello"
    assert parsed["correlation_id"] == "req-7"
    assert parsed["data"] == {"count": 3}


class ClearingSource:
    """Clears the owning session mid-fetch, so the result arrives stale."""

    def __init__(self) -> None:
        self.session: ComparablesSession | None = None

    async def fetch(self, query: SearchQuery) -> list:
        self.session.clear()
        return [{"id": "late", "price": 1000}]


def _session_data(caplog, message: str) -> dict:
    records = [r for r in caplog.records if r.name == "service.session" and r.getMessage() == message]
    assert records, f"no {message!r} record"
    return json.loads(JSONFormatter().format(records[-1]))["data"]


@pytest.mark.asyncio
async def test_session_logs_structured_search_events(caplog):
    caplog.set_level(logging.INFO, logger="service.session")

    session = ComparablesSession(SampleDataSource(count=5, seed=1))
    await session.search(SearchQuery())
    assert _session_data(caplog, "Working set replaced") == {"generation": 1, "listings": 5}

    source = ClearingSource()
    stale = ComparablesSession(source)
    source.session = stale
    assert await stale.search(SearchQuery()) is False
    assert _session_data(caplog, "Discarding stale search result") == {"generation": 1, "current_generation": 2}
    assert stale.listings == ()


# ── Settings ────────────────────────────────────────────────────────


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("MARKETCHECK_API_KEY", "secret")
    monkeypatch.setenv("DATA_SOURCE", "live")
    monkeypatch.setenv("DEFAULT_ZIP", "10001")
    settings = ServiceSettings()
    assert settings.marketcheck_api_key == "secret"
    assert settings.default_zip == "10001"
    assert settings.use_sample_data is False


def test_settings_fall_back_to_sample_without_key(monkeypatch):
    monkeypatch.delenv("MARKETCHECK_API_KEY", raising=False)
    monkeypatch.delenv("DATA_SOURCE", raising=False)
    assert ServiceSettings().use_sample_data is True
