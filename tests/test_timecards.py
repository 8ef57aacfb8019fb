from datetime import timedelta

import pytest
from httpx import ASGITransport, AsyncClient

from busops.database import async_session
from busops.main import app
from busops.models.work_session import WorkSession
from busops.services.business_calendar import business_date, utcnow
from conftest import make_driver


async def _session(driver_id: str, day: str, start: str, end: str | None, seconds: int | None) -> None:
    async with async_session() as db:
        db.add(WorkSession(
            id=f"{driver_id}-{day}-{start}",
            driver_id=driver_id,
            work_date=day,
            start_time=f"{day}T{start}:00+00:00",
            end_time=f"{day}T{end}:00+00:00" if end else None,
            duration_seconds=seconds,
        ))
        await db.commit()


@pytest.mark.asyncio
async def test_live_clock_lists_todays_open_sessions():
    driver_id = await make_driver("Live")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        await client.post("/api/v1/time", json={"driver_id": driver_id, "action": "resume"})
        response = await client.get("/api/v1/timecards/live")

    assert response.status_code == 200
    data = response.json()["data"]
    assert driver_id in {d["id"] for d in data["drivers"]}
    mine = [e for e in data["entries"] if e["driver_id"] == driver_id]
    assert len(mine) == 1
    assert mine[0]["elapsed_seconds"] >= 0
    assert mine[0]["work_date"] == data["work_date"]


@pytest.mark.asyncio
async def test_driver_week_timecard():
    driver_id = await make_driver("Week")
    await _session(driver_id, "2026-02-09", "07:00", "09:00", 7200)
    await _session(driver_id, "2026-02-09", "14:00", "15:30", 5400)
    await _session(driver_id, "2026-02-11", "07:00", "08:00", 3600)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get(
            "/api/v1/timecards",
            params={"driver_id": driver_id, "week_start": "2026-02-09", "week_end": "2026-02-15"},
        )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["driver"]["id"] == driver_id
    assert len(data["entries"]) == 3
    assert data["summary"]["total_seconds"] == 16200
    assert data["summary"]["days"][0]["total_seconds"] == 12600


@pytest.mark.asyncio
async def test_all_drivers_week_totals():
    first = await make_driver("First")
    second = await make_driver("Second")
    await _session(first, "2026-01-05", "07:00", "08:00", 3600)
    await _session(second, "2026-01-06", "07:00", "07:30", 1800)
    await _session(second, "2026-01-07", "07:00", "07:15", 900)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get(
            "/api/v1/timecards", params={"week_start": "2026-01-05", "week_end": "2026-01-11"}
        )

    data = response.json()["data"]
    assert data["totals"][first] == 3600
    assert data["totals"][second] == 2700


@pytest.mark.asyncio
async def test_unknown_driver_timecard_is_404():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get(
            "/api/v1/timecards",
            params={"driver_id": "nonexistent", "week_start": "2026-02-09", "week_end": "2026-02-15"},
        )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_live_clock_flags_sessions_left_open_yesterday():
    driver_id = await make_driver("Forgot")
    yesterday = (business_date(utcnow()) - timedelta(days=1)).isoformat()
    await _session(driver_id, yesterday, "07:00", None, None)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        live = await client.get("/api/v1/timecards/live")
        closed = await client.post("/api/v1/time", json={"driver_id": driver_id, "action": "pause"})
        after = await client.get("/api/v1/timecards/live")

    mine = [e for e in live.json()["data"]["entries"] if e["driver_id"] == driver_id]
    assert len(mine) == 1
    assert mine[0]["stale"] is True
    assert mine[0]["work_date"] == yesterday
    assert closed.status_code == 200
    assert driver_id not in {e["driver_id"] for e in after.json()["data"]["entries"]}
