from __future__ import annotations

import asyncio

import httpx
import pytest

from portfolio_insights.cache import InMemorySnapshotCache
from portfolio_insights.client import StartupSnapshotSource, StartupsClient
from portfolio_insights.errors import StartupsFetchError

URL = "http://analysis.test/api/startups"
PAYLOAD = [
    {"id": "a", "name": "Alpha", "overallScore": 72, "createdAt": "2026-10-01T10:00:00Z"},
    {"id": "b", "name": "Beta", "createdAt": "2026-10-02T10:00:00Z"},
]


def _client(handler, token=None) -> StartupsClient:
    return StartupsClient(URL, token=token, transport=httpx.MockTransport(handler))


def test_fetch_sends_bearer_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=PAYLOAD)

    data = asyncio.run(_client(handler, token="secret").fetch_startups())
    assert data == PAYLOAD
    assert seen["auth"] == "Bearer secret"


def test_fetch_without_token_has_no_auth_header():
    def handler(request: httpx.Request) -> httpx.Response:
        assert "Authorization" not in request.headers
        return httpx.Response(200, json=[])

    assert asyncio.run(_client(handler).fetch_startups()) == []


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, content=b"<html>"),
        httpx.Response(200, json={"startups": []}),
    ],
)
def test_bad_responses_raise_fetch_error(response):
    with pytest.raises(StartupsFetchError):
        asyncio.run(_client(lambda request: response).fetch_startups())


def test_status_code_is_kept_on_error():
    with pytest.raises(StartupsFetchError) as info:
        asyncio.run(_client(lambda request: httpx.Response(401)).fetch_startups())
    assert info.value.status_code == 401


def test_transport_errors_raise_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(StartupsFetchError):
        asyncio.run(_client(handler).fetch_startups())


def test_live_snapshot_is_cached():
    cache = InMemorySnapshotCache()
    source = StartupSnapshotSource(_client(lambda request: httpx.Response(200, json=PAYLOAD)), cache)

    snapshot = asyncio.run(source.load())
    assert snapshot.source == "live"
    assert [r.id for r in snapshot.records] == ["a", "b"]
    assert asyncio.run(cache.read()) == PAYLOAD


def test_failed_fetch_falls_back_to_cache():
    cache = InMemorySnapshotCache()
    asyncio.run(cache.write(PAYLOAD[:1]))
    source = StartupSnapshotSource(_client(lambda request: httpx.Response(503)), cache)

    snapshot = asyncio.run(source.load())
    assert snapshot.source == "cache"
    assert [r.id for r in snapshot.records] == ["a"]


def test_failed_fetch_without_cache_is_empty():
    source = StartupSnapshotSource(_client(lambda request: httpx.Response(503)), InMemorySnapshotCache())
    snapshot = asyncio.run(source.load())
    assert snapshot.source == "empty"
    assert snapshot.records == []


def test_cache_write_failure_does_not_fail_the_load():
    class BrokenCache(InMemorySnapshotCache):
        async def write(self, payload):
            raise OSError("disk full")

    source = StartupSnapshotSource(_client(lambda request: httpx.Response(200, json=PAYLOAD)), BrokenCache())
    snapshot = asyncio.run(source.load())
    assert snapshot.source == "live"
    assert len(snapshot.records) == 2
