"""
Tests for the HTTP stats client and view counting helpers.
"""

from datetime import datetime

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from ewm.core.exceptions import StatsServiceError
from ewm.infrastructure.stats_client import HttpStatsClient
from ewm.main import app
from ewm.services import views_service
from ewm.services.interfaces.memory_stats import InMemoryStatsClient
from ewm.services.stats_factory import get_stats_client
from ewm_stats.schemas import HitCreate


def make_hit(uri: str, ip: str = "10.0.0.1") -> HitCreate:
    return HitCreate(app="ewm-main-service", uri=uri, ip=ip, timestamp=datetime(2024, 5, 1, 12))


@pytest.mark.asyncio
async def test_http_client_round_trip_against_stats_app(stats_transport: ASGITransport):
    stats = HttpStatsClient("http://stats", transport=stats_transport)
    await stats.record_hit(make_hit("/events/1"))
    await stats.record_hit(make_hit("/events/1", ip="10.0.0.2"))
    await stats.record_hit(make_hit("/events/2"))

    result = await stats.query_stats(
        datetime(2024, 1, 1), datetime(2025, 1, 1), ["/events/1", "/events/2"], unique=True
    )
    assert [(s.uri, s.hits) for s in result] == [("/events/1", 2), ("/events/2", 1)]


@pytest.mark.asyncio
async def test_fetch_views_batches_one_query(stats_transport: ASGITransport):
    stats = HttpStatsClient("http://stats", transport=stats_transport)
    await stats.record_hit(make_hit("/events/3"))

    views = await views_service.fetch_views(stats, [3, 4])
    assert views == {3: 1}
    assert await views_service.fetch_event_views(stats, 4) == 0


@pytest.mark.asyncio
async def test_error_status_raises_stats_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text="down"))
    stats = HttpStatsClient("http://stats", transport=transport)

    with pytest.raises(StatsServiceError):
        await stats.record_hit(make_hit("/events/1"))


@pytest.mark.asyncio
async def test_malformed_body_raises_stats_error():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json=[{"app": "ewm", "uri": "/events/1"}])
    )
    stats = HttpStatsClient("http://stats", transport=transport)

    with pytest.raises(StatsServiceError):
        await stats.query_stats(datetime(2024, 1, 1), datetime(2025, 1, 1))


@pytest.mark.asyncio
async def test_query_parameters_on_the_wire():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json=[])

    stats = HttpStatsClient("http://stats", transport=httpx.MockTransport(handler))
    await stats.query_stats(
        datetime(2024, 1, 1), datetime(2024, 2, 1, 8, 30), ["/events/1", "/events/2"], unique=True
    )
    assert seen == {
        "start": "2024-01-01 00:00:00",
        "end": "2024-02-01 08:30:00",
        "unique": "true",
        "uris": "/events/1,/events/2",
    }


@pytest.mark.asyncio
async def test_non_numeric_uri_in_stats_response():
    class BrokenStats(InMemoryStatsClient):
        async def query_stats(self, start, end, uris=None, unique=False):
            # ignores the uri filter, as a misbehaving server might
            return await super().query_stats(start, end, None, unique)

    stats = BrokenStats()
    await stats.record_hit(make_hit("/events/abc"))

    with pytest.raises(StatsServiceError):
        await views_service.fetch_views(stats, [1])


def test_event_uri_round_trip():
    assert views_service.event_uri(42) == "/events/42"
    assert views_service.event_id_from_uri("/events/42") == 42
    with pytest.raises(StatsServiceError):
        views_service.event_id_from_uri("/events/")


@pytest.mark.asyncio
async def test_stats_failure_surfaces_as_500(client: AsyncClient, published_event):
    failing = HttpStatsClient(
        "http://stats", transport=httpx.MockTransport(lambda request: httpx.Response(500))
    )
    app.dependency_overrides[get_stats_client] = lambda: failing

    response = await client.get(f"/events/{published_event['id']}")
    assert response.status_code == 500
    assert response.json()["reason"] == "Stats service failure."
