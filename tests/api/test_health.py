"""Smoke tests for health and app wiring."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json().get("status") == "ok"


async def test_ready_reports_memory_backend(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["backend"] == "memory"


async def test_missing_identity_returns_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/collections")
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"
