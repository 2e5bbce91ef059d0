"""Smoke tests for health and app wiring."""

from httpx import AsyncClient

from taskboard.core.config import get_settings


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200, status ok and the polling interval."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data.get("status") == "ok"
    assert data["poll_interval_seconds"] == get_settings().poll_interval_seconds


async def test_health_advertises_poll_interval_header(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.headers["x-poll-interval"] == str(
        get_settings().poll_interval_seconds
    )


async def test_response_echoes_request_id(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["x-request-id"] == "abc-123"


async def test_readiness_without_database_is_503(client: AsyncClient) -> None:
    """GET /api/v1/health/ready returns 503 when no database is configured."""
    if get_settings().database_url:
        return
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"
