"""
Tests for the stats service endpoints.
"""

import logging

import pytest
from httpx import AsyncClient

from ewm.core.logging import setup_logging
from ewm_stats.config import StatsSettings
from ewm_stats.schemas import split_uris, uris_param

START = "2020-01-01 00:00:00"
END = "2035-01-01 00:00:00"


async def hit(api: AsyncClient, uri: str, ip: str, timestamp: str = "2024-05-01 12:00:00"):
    response = await api.post(
        "/hit", json={"app": "ewm-main-service", "uri": uri, "ip": ip, "timestamp": timestamp}
    )
    assert response.status_code == 201, response.text


@pytest.mark.asyncio
async def test_stats_grouped_and_ordered_by_hits(stats_api: AsyncClient):
    await hit(stats_api, "/events/1", "10.0.0.1")
    await hit(stats_api, "/events/2", "10.0.0.1")
    await hit(stats_api, "/events/2", "10.0.0.2")
    await hit(stats_api, "/events/2", "10.0.0.2")

    response = await stats_api.get("/stats", params={"start": START, "end": END})
    assert response.status_code == 200
    assert response.json() == [
        {"app": "ewm-main-service", "uri": "/events/2", "hits": 3},
        {"app": "ewm-main-service", "uri": "/events/1", "hits": 1},
    ]


@pytest.mark.asyncio
async def test_unique_counts_distinct_ips(stats_api: AsyncClient):
    for ip in ["10.0.0.1", "10.0.0.1", "10.0.0.2"]:
        await hit(stats_api, "/events/7", ip)

    response = await stats_api.get(
        "/stats", params={"start": START, "end": END, "uris": "/events/7", "unique": "true"}
    )
    assert response.json() == [{"app": "ewm-main-service", "uri": "/events/7", "hits": 2}]


@pytest.mark.asyncio
async def test_uris_repeated_or_comma_joined(stats_api: AsyncClient):
    for uri in ["/events/1", "/events/2", "/events/3"]:
        await hit(stats_api, uri, "10.0.0.1")

    response = await stats_api.get(
        "/stats", params=[("start", START), ("end", END), ("uris", "/events/1,/events/2")]
    )
    assert {s["uri"] for s in response.json()} == {"/events/1", "/events/2"}

    response = await stats_api.get(
        "/stats", params=[("start", START), ("end", END), ("uris", "/events/1"), ("uris", "/events/3")]
    )
    assert {s["uri"] for s in response.json()} == {"/events/1", "/events/3"}


@pytest.mark.asyncio
async def test_time_window_is_inclusive(stats_api: AsyncClient):
    await hit(stats_api, "/events/1", "10.0.0.1", timestamp="2024-05-01 12:00:00")
    await hit(stats_api, "/events/1", "10.0.0.2", timestamp="2024-06-01 12:00:00")

    response = await stats_api.get(
        "/stats", params={"start": "2024-05-01 12:00:00", "end": "2024-05-31 00:00:00"}
    )
    assert response.json() == [{"app": "ewm-main-service", "uri": "/events/1", "hits": 1}]


@pytest.mark.asyncio
async def test_start_after_end_is_bad_request(stats_api: AsyncClient):
    response = await stats_api.get("/stats", params={"start": END, "end": START})
    assert response.status_code == 400
    assert response.json()["status"] == "BAD_REQUEST"


@pytest.mark.asyncio
async def test_missing_or_malformed_dates(stats_api: AsyncClient):
    assert (await stats_api.get("/stats", params={"start": START})).status_code == 400
    response = await stats_api.get("/stats", params={"start": "yesterday", "end": END})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_invalid_hit_rejected(stats_api: AsyncClient):
    response = await stats_api.post("/hit", json={"app": "ewm", "uri": "/events/1"})
    assert response.status_code == 400


def test_split_uris():
    assert split_uris(None) == []
    assert split_uris("/events/1") == ["/events/1"]
    assert split_uris(["/events/1,/events/2", "/events/3"]) == ["/events/1", "/events/2", "/events/3"]
    assert uris_param([]) is None
    assert uris_param(["/a", "/b"]) == "/a,/b"


def test_logging_follows_stats_settings():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        setup_logging(StatsSettings(LOG_LEVEL="DEBUG"))
        assert root.level == logging.DEBUG

        setup_logging(StatsSettings(LOG_LEVEL="WARNING"))
        assert root.level == logging.WARNING
    finally:
        root.handlers = handlers
        root.setLevel(level)
