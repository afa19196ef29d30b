"""
Tests for the public event catalogue and view counting.
"""

import pytest
from unittest.mock import AsyncMock

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from ewm.core.exceptions import ValidationError
from ewm.models import Event
from ewm.services import event_service, views_service
from ewm.services.interfaces.memory_stats import InMemoryStatsClient
from tests.conftest import future


@pytest.mark.asyncio
async def test_published_event_page_counts_unique_views(
    client: AsyncClient, stats_client: InMemoryStatsClient, published_event
):
    url = f"/events/{published_event['id']}"

    response = await client.get(url)
    assert response.status_code == 200
    assert response.json()["views"] == 1

    # same client address again: still one unique view
    response = await client.get(url)
    assert response.json()["views"] == 1

    assert [hit.uri for hit in stats_client.hits] == [url, url]
    assert stats_client.hits[0].app == "ewm-main-service"


@pytest.mark.asyncio
async def test_views_are_persisted(
    client: AsyncClient, db_session: AsyncSession, published_event
):
    await client.get(f"/events/{published_event['id']}")

    db_session.expire_all()
    event = await db_session.get(Event, published_event["id"])
    assert event.views == 1


@pytest.mark.asyncio
async def test_unpublished_event_is_not_public(
    client: AsyncClient, stats_client: InMemoryStatsClient, pending_event
):
    response = await client.get(f"/events/{pending_event['id']}")
    assert response.status_code == 404
    assert stats_client.hits == []


@pytest.mark.asyncio
async def test_listing_shows_only_published_future_events(
    client: AsyncClient, stats_client: InMemoryStatsClient, make_event
):
    published = await make_event()
    await make_event(publish=False, title="Not yet")

    response = await client.get("/events")
    assert response.status_code == 200
    data = response.json()
    assert [e["id"] for e in data] == [published["id"]]
    assert "description" not in data[0]
    assert [hit.uri for hit in stats_client.hits] == ["/events"]


@pytest.mark.asyncio
async def test_listing_refreshes_views(client: AsyncClient, published_event):
    await client.get(f"/events/{published_event['id']}")

    response = await client.get("/events")
    assert response.json()[0]["views"] == 1


@pytest.mark.asyncio
async def test_listing_text_and_paid_filters(client: AsyncClient, make_event):
    jazz = await make_event(
        title="Jazz night",
        annotation="An evening of live JAZZ standards downtown",
        paid=True,
    )
    await make_event(title="Chess club")

    response = await client.get("/events", params={"text": "jazz"})
    assert [e["id"] for e in response.json()] == [jazz["id"]]

    response = await client.get("/events", params={"paid": "true"})
    assert [e["id"] for e in response.json()] == [jazz["id"]]


@pytest.mark.asyncio
async def test_listing_sort_by_event_date(client: AsyncClient, make_event):
    later = await make_event(eventDate=future(20))
    sooner = await make_event(eventDate=future(5))

    response = await client.get("/events", params={"sort": "EVENT_DATE"})
    assert [e["id"] for e in response.json()] == [sooner["id"], later["id"]]


@pytest.mark.asyncio
async def test_listing_sort_by_views(client: AsyncClient, make_event, stats_client):
    quiet = await make_event(title="Quiet event")
    popular = await make_event(title="Popular event")
    await client.get(f"/events/{popular['id']}")

    response = await client.get("/events", params={"sort": "VIEWS"})
    assert [e["id"] for e in response.json()] == [popular["id"], quiet["id"]]


@pytest.mark.asyncio
async def test_listing_unknown_sort(client: AsyncClient):
    response = await client.get("/events", params={"sort": "POPULARITY"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_listing_inverted_range(client: AsyncClient, stats_client):
    response = await client.get(
        "/events", params={"rangeStart": future(10), "rangeEnd": future(1)}
    )
    assert response.status_code == 400
    assert stats_client.hits == []


@pytest.mark.asyncio
async def test_inverted_range_rejected_before_any_query():
    db = AsyncMock(spec=AsyncSession)
    stats = InMemoryStatsClient()

    with pytest.raises(ValidationError):
        await event_service.search_events_public(
            db,
            stats,
            uri="/events",
            ip="127.0.0.1",
            range_start="2030-01-02 00:00:00",
            range_end="2030-01-01 00:00:00",
        )

    db.execute.assert_not_called()
    assert stats.hits == []


@pytest.mark.asyncio
async def test_only_available_hides_full_events(client: AsyncClient, make_event, make_user):
    full = await make_event(participantLimit=1, requestModeration=False, title="Tiny event")
    open_event = await make_event(title="Open event")

    guest = await make_user("Guest")
    response = await client.post(f"/users/{guest['id']}/requests?eventId={full['id']}")
    assert response.status_code == 201

    response = await client.get("/events", params={"onlyAvailable": "true"})
    assert [e["id"] for e in response.json()] == [open_event["id"]]

    response = await client.get("/events")
    assert {e["id"] for e in response.json()} == {full["id"], open_event["id"]}


@pytest.mark.asyncio
async def test_listing_pagination(client: AsyncClient, make_event):
    first = await make_event(title="First event")
    second = await make_event(title="Second event")

    response = await client.get("/events", params={"from": 1, "size": 1})
    assert [e["id"] for e in response.json()] == [second["id"]]

    response = await client.get("/events", params={"from": -1})
    assert response.status_code == 400
    assert first["id"] != second["id"]


@pytest.mark.asyncio
async def test_fetching_views_twice_without_hits_is_stable():
    stats = InMemoryStatsClient()
    await views_service.record_hit(stats, views_service.event_uri(7), "10.0.0.1")
    await views_service.record_hit(stats, views_service.event_uri(7), "10.0.0.2")

    first = await views_service.fetch_event_views(stats, 7)
    second = await views_service.fetch_event_views(stats, 7)
    assert first == second == 2
    assert len(stats.hits) == 2

    assert await views_service.fetch_event_views(stats, 8) == 0
