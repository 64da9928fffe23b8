"""Integration tests for the health endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_liveness_always_healthy(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_readiness_against_test_database(client: AsyncClient) -> None:
    """Ready with a reachable database and the Redis relay switched off."""
    response = await client.get("/health/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["checks"]["database"]["status"] == "healthy"
    assert data["checks"]["redis"] == {"status": "not_configured"}
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_health_needs_no_token(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 200
