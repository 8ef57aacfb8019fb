from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from busops.database import get_db
from busops.dependencies import require_driver
from busops.schemas.time import TimeAction, WorkSessionRecord
from busops.services.business_calendar import business_date, parse_date, resolve_week, utcnow
from busops.services.time_sessions import TimeSessionAggregator
from busops.utils.response import dump_all, success_response

router = APIRouter(prefix="/time", tags=["time"])


@router.get("/day")
async def day_total(
    driver_id: str = Query(...),
    date: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    now = utcnow()
    work_date = parse_date(date) or business_date(now)
    summary = await TimeSessionAggregator(db).daily_total(driver_id, work_date, now)
    return success_response(data=summary.model_dump(mode="json"))


@router.post("")
async def pause_or_resume(payload: TimeAction, db: AsyncSession = Depends(get_db)):
    await require_driver(db, payload.driver_id)
    aggregator = TimeSessionAggregator(db)
    if payload.action == "pause":
        session = await aggregator.end_session(payload.driver_id)
    else:
        session = await aggregator.start_session(payload.driver_id)
    await db.commit()
    return success_response(data=session.model_dump(mode="json"))


@router.get("/entries")
async def time_entries(
    driver_id: str = Query(...),
    start_date: str = Query(...),
    end_date: str = Query(...),
    db: AsyncSession = Depends(get_db),
):
    start = parse_date(start_date, "start_date")
    end = parse_date(end_date, "end_date")
    sessions = await TimeSessionAggregator(db).sessions_between(driver_id, start, end)
    # Newest day first, sessions within a day in clock order.
    sessions.sort(key=lambda s: s.start_time)
    sessions.sort(key=lambda s: s.work_date, reverse=True)
    return success_response(data=dump_all(sessions, WorkSessionRecord))


@router.get("/week")
async def week_total(
    driver_id: str = Query(...),
    week_start: str | None = Query(default=None),
    week_end: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    now = utcnow()
    start, end = resolve_week(week_start, week_end, business_date(now))
    summary = await TimeSessionAggregator(db).weekly_total(driver_id, start, end, now)
    return success_response(data=summary.model_dump(mode="json"))

