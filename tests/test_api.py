import httpx
import pytest

from conftest import FakeFeed, make_record
from feedsync.db import get_session
from feedsync.entrypoints.api.routers.jobs import get_session_factory
from feedsync.entrypoints.fastapi_app import create_app
from feedsync.service_layer.use_cases import import_listings as import_mod


@pytest.fixture
def api(async_session_maker, feed_settings, monkeypatch):
    monkeypatch.setattr(feed_settings, "API_KEY", "test-key")

    app = create_app()

    async def _session():
        async with async_session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_session_factory] = lambda: async_session_maker
    return app


def _use_feed(monkeypatch, feed) -> None:
    monkeypatch.setattr(import_mod.ODataFeedClient, "from_settings", classmethod(lambda cls, http_client=None: feed))


async def _client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_health_is_open(api):
    async with await _client(api) as c:
        r = await c.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_jobs_require_api_key(api):
    async with await _client(api) as c:
        r = await c.post("/jobs/import")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_import_endpoint_runs_and_lists_job(api, monkeypatch):
    _use_feed(monkeypatch, FakeFeed([[make_record(1), make_record(2)], [make_record(3)]], total=3))
    headers = {"X-API-Key": "test-key"}

    async with await _client(api) as c:
        r = await c.post("/jobs/import", params={"max_listings": 2}, headers=headers)
        assert r.status_code == 200
        body = r.json()
        assert body["imported"] == 2
        assert body["stop_reason"] == "budget"
        assert body["total_available"] == 3

        runs = await c.get("/jobs/runs", headers=headers)

    assert runs.status_code == 200
    rows = runs.json()
    assert len(rows) == 1
    assert rows[0]["job_name"] == "feed_import_api"
    assert rows[0]["status"] == "success"


@pytest.mark.asyncio
async def test_import_endpoint_maps_feed_failure_to_502(api, monkeypatch):
    _use_feed(monkeypatch, FakeFeed([[make_record(1)]], fail_at=0))

    async with await _client(api) as c:
        r = await c.post("/jobs/import", headers={"X-API-Key": "test-key"})

    assert r.status_code == 502
    assert "HTTP 500" in r.json()["detail"]


@pytest.mark.asyncio
async def test_import_endpoint_missing_owner_is_409(api, monkeypatch, feed_settings):
    monkeypatch.setattr(feed_settings, "FEED_IMPORT_OWNER_ID", "nobody")
    _use_feed(monkeypatch, FakeFeed([[make_record(1)]]))

    async with await _client(api) as c:
        r = await c.post("/jobs/import", headers={"X-API-Key": "test-key"})

    assert r.status_code == 409


@pytest.mark.asyncio
async def test_debug_config_redacts_token(api, monkeypatch, feed_settings):
    monkeypatch.setattr(feed_settings, "FEED_API_URL", "https://x.example/OData/har/Property?access_token=SECRET")

    async with await _client(api) as c:
        r = await c.get("/debug/config", headers={"X-API-Key": "test-key"})

    assert r.status_code == 200
    assert "SECRET" not in r.text
    assert r.json()["FEED_API_URL"].endswith("access_token=***")
