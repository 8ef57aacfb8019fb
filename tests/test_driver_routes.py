import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from busops.database import async_session
from busops.main import app
from busops.models.attendance import AttendanceRecord
from busops.models.route import RouteAssignment
from busops.seed import SEED_DRIVERS, SEED_ROUTE, SEED_SCHOOL, SEED_STOPS, SEED_STUDENTS
from conftest import make_driver

ROUTE_ID = SEED_ROUTE["id"]


async def _assign_every_day(driver_id: str) -> None:
    async with async_session() as db:
        for day in range(7):
            db.add(RouteAssignment(
                id=str(uuid.uuid4()), route_id=ROUTE_ID, driver_id=driver_id, day_of_week=day,
            ))
        await db.commit()


@pytest.mark.asyncio
async def test_seeded_route_is_grouped_for_the_driver():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/driver/routes", params={"driver_id": SEED_DRIVERS[0]["id"]})

    assert response.status_code == 200
    data = response.json()["data"]
    assert [r["id"] for r in data["routes"]] == [ROUTE_ID]
    assert data["total_route_counts"] == {"AM": 1, "PM": 0}

    stops = data["stops_map"][ROUTE_ID]
    assert [s["sequence"] for s in stops] == [1, 3, 4]

    household, single, school = stops
    assert household["student_name"] == "Ava Park, Leo Park"
    assert household["address"] == "14 Maple Ave"
    assert household["primary_guardian_name"] == "Jin Park"
    assert single["student_name"] == "Mia Stone"
    assert single["address"] == "9 Birch Rd"
    assert single["household_id"] is None
    assert school["student_name"] == "Ava Park, Leo Park, Mia Stone"
    assert school["address"] == SEED_SCHOOL["address"]
    assert school["name"] == SEED_SCHOOL["name"]
    assert school["primary_guardian_name"] is None


@pytest.mark.asyncio
async def test_driver_without_assignments_gets_nothing():
    driver_id = await make_driver()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/driver/routes", params={"driver_id": driver_id})

    data = response.json()["data"]
    assert data["routes"] == []
    assert data["stops_map"] == {}
    assert data["total_route_counts"] == {"AM": 0, "PM": 0}


@pytest.mark.asyncio
async def test_unknown_driver_is_404():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/driver/routes", params={"driver_id": "nonexistent"})

    assert response.status_code == 404
    assert response.json()["message"] == "Driver not found"


@pytest.mark.asyncio
async def test_completed_route_drops_off_the_list():
    driver_id = await make_driver()
    await _assign_every_day(driver_id)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        before = await client.get("/api/v1/driver/routes", params={"driver_id": driver_id})
        first = await client.post(f"/api/v1/driver/routes/{ROUTE_ID}/complete", json={"driver_id": driver_id})
        again = await client.post(f"/api/v1/driver/routes/{ROUTE_ID}/complete", json={"driver_id": driver_id})
        after = await client.get("/api/v1/driver/routes", params={"driver_id": driver_id})

    assert [r["id"] for r in before.json()["data"]["routes"]] == [ROUTE_ID]
    assert first.status_code == 200
    assert again.json()["data"]["completed_at"] == first.json()["data"]["completed_at"]

    data = after.json()["data"]
    assert data["routes"] == []
    assert ROUTE_ID not in data["stops_map"]
    assert data["total_route_counts"]["AM"] == 1


@pytest.mark.asyncio
async def test_complete_unknown_route_is_404():
    driver_id = await make_driver()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/v1/driver/routes/nonexistent/complete", json={"driver_id": driver_id})

    assert response.status_code == 404
    assert response.json()["message"] == "Route not found"


@pytest.mark.asyncio
async def test_attendance_replaces_per_stop():
    driver_id = await make_driver()
    await _assign_every_day(driver_id)
    student_id = SEED_STUDENTS[0]["id"]
    pickup, dropoff = SEED_STOPS[0]["id"], SEED_STOPS[3]["id"]

    def mark(stop_id: str, status: str) -> dict:
        return {
            "driver_id": driver_id, "student_id": student_id, "route_id": ROUTE_ID,
            "route_stop_id": stop_id, "status": status,
        }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        created = await client.post("/api/v1/driver/attendance", json=mark(pickup, "picked_up"))
        await client.post("/api/v1/driver/attendance", json=mark(pickup, "absent"))
        await client.post("/api/v1/driver/attendance", json=mark(dropoff, "dropped_off"))
        response = await client.get("/api/v1/driver/routes", params={"driver_id": driver_id})

    assert created.status_code == 201
    assert created.json()["data"]["status"] == "picked_up"

    attendance = response.json()["data"]["attendance"]
    assert attendance[f"{student_id}:{pickup}"] == "absent"
    assert attendance[f"{student_id}:{dropoff}"] == "dropped_off"
    assert student_id in attendance

    async with async_session() as db:
        rows = (await db.execute(
            select(func.count()).select_from(AttendanceRecord).where(AttendanceRecord.driver_id == driver_id)
        )).scalar_one()
    assert rows == 2


@pytest.mark.asyncio
async def test_attendance_for_unknown_student_is_404():
    driver_id = await make_driver()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post("/api/v1/driver/attendance", json={
            "driver_id": driver_id, "student_id": "nonexistent", "route_id": ROUTE_ID, "status": "absent",
        })

    assert response.status_code == 404
    assert response.json()["message"] == "Student not found"
