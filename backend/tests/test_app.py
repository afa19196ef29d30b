"""
Tests for application-level endpoints and the error body.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_reports_disabled_cache(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["cache"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_metrics_exposed(client: AsyncClient, pending_event):
    await client.patch(f"/admin/events/{pending_event['id']}", json={"stateAction": "PUBLISH_EVENT"})

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "ewm_event_state_transitions_total" in response.text


@pytest.mark.asyncio
async def test_request_id_header(client: AsyncClient):
    response = await client.get("/categories")
    assert "X-Request-ID" in response.headers
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
async def test_unknown_route_uses_error_body(client: AsyncClient):
    response = await client.get("/nowhere")
    assert response.status_code == 404
    assert response.json()["status"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_malformed_json_is_bad_request(client: AsyncClient):
    response = await client.post(
        "/admin/users", content="not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
