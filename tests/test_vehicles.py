import pytest
from httpx import ASGITransport, AsyncClient

from busops.main import app
from busops.seed import SEED_VEHICLES


@pytest.mark.asyncio
async def test_get_vehicles_returns_list():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/vehicles")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert isinstance(body["data"], list)
    assert [v["label"] for v in body["data"]] == sorted(v["label"] for v in SEED_VEHICLES)


@pytest.mark.asyncio
async def test_get_vehicles_item_format():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/vehicles", params={"active_only": "true"})

    vehicle = response.json()["data"][0]
    assert vehicle["label"] == "Bus 12"
    assert vehicle["plate"] == "SB-1012"
    assert vehicle["capacity"] == 48
    assert vehicle["is_active"] is True
