from collections import defaultdict

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from busops.database import get_db
from busops.dependencies import require_driver
from busops.models.driver import Driver
from busops.schemas.driver import DriverResponse
from busops.schemas.time import WorkSessionRecord
from busops.services.business_calendar import business_date, resolve_week, utcnow
from busops.services.time_sessions import TimeSessionAggregator
from busops.utils.response import dump, dump_all, success_response

router = APIRouter(prefix="/timecards", tags=["timecards"])


@router.get("/live")
async def live_clock(db: AsyncSession = Depends(get_db)):
    now = utcnow()
    result = await db.execute(select(Driver).order_by(Driver.full_name))
    drivers = result.scalars().all()
    sessions = await TimeSessionAggregator(db).live_sessions(now)
    return success_response(data={
        "work_date": business_date(now).isoformat(),
        "drivers": dump_all(drivers, DriverResponse),
        "entries": [s.model_dump(mode="json") for s in sessions],
    })


@router.get("")
async def weekly_timecards(
    week_start: str | None = Query(default=None),
    week_end: str | None = Query(default=None),
    driver_id: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    now = utcnow()
    start, end = resolve_week(week_start, week_end, business_date(now))
    aggregator = TimeSessionAggregator(db)

    if driver_id:
        driver = await require_driver(db, driver_id)
        entries = await aggregator.sessions_between(driver_id, start, end)
        summary = await aggregator.weekly_total(driver_id, start, end, now)
        return success_response(data={
            "driver": dump(driver, DriverResponse),
            "entries": dump_all(entries, WorkSessionRecord),
            "summary": summary.model_dump(mode="json"),
        })

    entries = await aggregator.sessions_between(None, start, end)
    per_driver: dict[str, list[WorkSessionRecord]] = defaultdict(list)
    for entry in entries:
        per_driver[entry.driver_id].append(entry)

    totals = {
        d_id: sum(s.elapsed_seconds(now) for s in sessions)
        for d_id, sessions in per_driver.items()
    }
    return success_response(data={
        "week_start": start.isoformat(),
        "week_end": end.isoformat(),
        "entries": dump_all(entries, WorkSessionRecord),
        "totals": totals,
    })
