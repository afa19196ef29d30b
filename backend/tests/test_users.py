"""
Tests for admin user endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_user(client: AsyncClient):
    response = await client.post("/admin/users", json={"name": "Ada Lovelace", "email": "ada@example.com"})
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Ada Lovelace"
    assert data["email"] == "ada@example.com"
    assert "id" in data


@pytest.mark.asyncio
async def test_duplicate_email_conflicts(client: AsyncClient):
    payload = {"name": "Ada Lovelace", "email": "ada@example.com"}
    await client.post("/admin/users", json=payload)
    response = await client.post("/admin/users", json=payload)
    assert response.status_code == 409
    assert response.json()["reason"] == "For the requested operation the conditions are not met."


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"name": "A", "email": "ada@example.com"},
        {"name": "Ada", "email": "not-an-email"},
        {"name": "Ada"},
    ],
)
async def test_invalid_user_payload(client: AsyncClient, payload):
    response = await client.post("/admin/users", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["status"] == "BAD_REQUEST"
    assert body["message"]
    assert body["timestamp"]


@pytest.mark.asyncio
async def test_list_users_by_ids_and_page(client: AsyncClient, make_user):
    first = await make_user("First")
    second = await make_user("Second")
    third = await make_user("Third")

    response = await client.get("/admin/users", params=[("ids", first["id"]), ("ids", third["id"])])
    assert [u["id"] for u in response.json()] == [first["id"], third["id"]]

    response = await client.get("/admin/users", params={"from": 1, "size": 1})
    assert [u["id"] for u in response.json()] == [second["id"]]


@pytest.mark.asyncio
async def test_delete_user(client: AsyncClient, make_user):
    user = await make_user()
    response = await client.delete(f"/admin/users/{user['id']}")
    assert response.status_code == 204

    response = await client.delete(f"/admin/users/{user['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_user_with_events_conflicts(client: AsyncClient, initiator, pending_event):
    response = await client.delete(f"/admin/users/{initiator['id']}")
    assert response.status_code == 409
