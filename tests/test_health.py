from unittest.mock import patch

import pytest
from httpx import AsyncClient, ASGITransport

from busops.main import SERVICE_NAME, VERSION, app


@pytest.mark.asyncio
async def test_health_reports_service_and_version():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "data": {"service": SERVICE_NAME, "version": VERSION},
        "message": None,
    }
    assert VERSION == app.version


@pytest.mark.asyncio
async def test_health_ignores_a_wrong_access_code():
    with patch("busops.dependencies.settings") as mock_settings:
        mock_settings.api_key = "bus-code"
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            health = await client.get("/health", headers={"X-API-Key": "wrong"})
            guarded = await client.get("/api/v1/vehicles", headers={"X-API-Key": "wrong"})

    assert health.status_code == 200
    assert health.json()["data"]["service"] == "busops-api"
    assert guarded.status_code == 403


@pytest.mark.asyncio
async def test_health_is_not_under_the_api_prefix():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")

    assert response.status_code == 404
