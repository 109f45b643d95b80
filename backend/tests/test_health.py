"""
Tests for the health endpoint and error handlers.
"""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"code": 200, "message": "API is healthy."}


@pytest.mark.asyncio
async def test_invalid_token(client: AsyncClient, test_org):
    response = await client.get(
        f"/api/v1/governance/meetings?organization_id={test_org.id}",
        headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401
