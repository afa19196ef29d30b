"""
Tests for compilation endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_compilation_embeds_events(client: AsyncClient, make_event):
    first = await make_event(title="First event")
    second = await make_event(title="Second event")

    response = await client.post(
        "/admin/compilations",
        json={"title": "Weekend picks", "pinned": True, "events": [second["id"], first["id"]]},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["pinned"] is True
    assert [e["id"] for e in data["events"]] == [first["id"], second["id"]]
    assert data["events"][0]["title"] == "First event"
    assert "description" not in data["events"][0]


@pytest.mark.asyncio
async def test_create_compilation_defaults(client: AsyncClient):
    response = await client.post("/admin/compilations", json={"title": "Empty"})
    assert response.status_code == 201
    assert response.json()["pinned"] is False
    assert response.json()["events"] == []


@pytest.mark.asyncio
async def test_unknown_event_in_compilation(client: AsyncClient):
    response = await client.post("/admin/compilations", json={"title": "Broken", "events": [999]})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_duplicate_title_conflicts(client: AsyncClient):
    await client.post("/admin/compilations", json={"title": "Weekend picks"})
    response = await client.post("/admin/compilations", json={"title": "Weekend picks"})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_compilation(client: AsyncClient, make_event):
    event = await make_event()
    compilation = (await client.post("/admin/compilations", json={"title": "Draft"})).json()

    response = await client.patch(
        f"/admin/compilations/{compilation['id']}",
        json={"pinned": True, "events": [event["id"]]},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Draft"
    assert data["pinned"] is True
    assert [e["id"] for e in data["events"]] == [event["id"]]

    response = await client.patch(f"/admin/compilations/{compilation['id']}", json={"events": []})
    assert response.json()["events"] == []


@pytest.mark.asyncio
async def test_delete_compilation(client: AsyncClient):
    compilation = (await client.post("/admin/compilations", json={"title": "Gone soon"})).json()
    response = await client.delete(f"/admin/compilations/{compilation['id']}")
    assert response.status_code == 204
    assert (await client.get(f"/compilations/{compilation['id']}")).status_code == 404
    assert (await client.delete(f"/admin/compilations/{compilation['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_public_listing_filters_pinned(client: AsyncClient):
    pinned = (await client.post("/admin/compilations", json={"title": "Pinned", "pinned": True})).json()
    await client.post("/admin/compilations", json={"title": "Regular"})

    response = await client.get("/compilations", params={"pinned": "true"})
    assert [c["id"] for c in response.json()] == [pinned["id"]]

    response = await client.get("/compilations")
    assert len(response.json()) == 2
