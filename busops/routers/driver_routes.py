import logging
import uuid as uuid_mod

from fastapi import APIRouter, Depends, Query
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from busops.database import get_db
from busops.dependencies import require_driver
from busops.models.attendance import AttendanceRecord
from busops.models.route import Route, RouteAssignment, RouteCompletion, RouteStop
from busops.models.school import School
from busops.models.student import Student
from busops.schemas.route import (
    AttendanceCreate,
    AttendanceResponse,
    DriverRoutes,
    RouteCompletionRequest,
    RouteCounts,
    RouteResponse,
    SchoolInfo,
    StopInput,
    StudentInfo,
)
from busops.services.business_calendar import business_date, day_of_week, to_storage, utcnow
from busops.services.route_stops import group_route_stops
from busops.utils.exceptions import NotFoundError
from busops.utils.response import dump, success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/driver", tags=["driver"])


@router.get("/routes")
async def todays_routes(driver_id: str = Query(...), db: AsyncSession = Depends(get_db)):
    await require_driver(db, driver_id)
    today = business_date(utcnow())

    result = await db.execute(
        select(RouteAssignment).where(
            RouteAssignment.driver_id == driver_id,
            RouteAssignment.day_of_week == day_of_week(today),
        )
    )
    route_ids = list({a.route_id for a in result.scalars().all() if a.is_active})
    if not route_ids:
        empty = DriverRoutes(routes=[], stops_map={}, attendance={}, total_route_counts=RouteCounts())
        return success_response(data=empty.model_dump(mode="json"))

    result = await db.execute(select(Route).where(Route.id.in_(route_ids)).order_by(Route.name))
    assigned = [r for r in result.scalars().all() if r.is_active]

    result = await db.execute(
        select(RouteCompletion.route_id).where(
            RouteCompletion.driver_id == driver_id,
            RouteCompletion.work_date == today.isoformat(),
        )
    )
    completed = set(result.scalars().all())
    active = [r for r in assigned if r.id not in completed]

    # Counts cover every assigned route so the driver app can gate AM/PM shifts.
    counts = RouteCounts(
        AM=sum(1 for r in assigned if r.direction in ("AM", "MIDDAY")),
        PM=sum(1 for r in assigned if r.direction == "PM"),
    )

    result = await db.execute(
        select(RouteStop)
        .where(RouteStop.route_id.in_([r.id for r in active]))
        .order_by(RouteStop.sequence)
    )
    stops = [StopInput.model_validate(s) for s in result.scalars().all()]

    student_ids = {s.student_id for s in stops if s.student_id}
    students: dict[str, StudentInfo] = {}
    if student_ids:
        result = await db.execute(select(Student).where(Student.id.in_(student_ids)))
        students = {s.id: StudentInfo.model_validate(s) for s in result.scalars().all()}

    school_ids = {s.school_id for s in stops if s.school_id}
    school_ids |= {s.school_id for s in students.values() if s.school_id}
    schools: dict[str, SchoolInfo] = {}
    if school_ids:
        result = await db.execute(select(School).where(School.id.in_(school_ids)))
        schools = {s.id: SchoolInfo.model_validate(s) for s in result.scalars().all()}

    stops_map = {
        route.id: group_route_stops([s for s in stops if s.route_id == route.id], students, schools)
        for route in active
    }

    result = await db.execute(
        select(AttendanceRecord).where(
            AttendanceRecord.driver_id == driver_id,
            AttendanceRecord.record_date == today.isoformat(),
        ).order_by(AttendanceRecord.recorded_at)
    )
    attendance: dict[str, str] = {}
    for rec in result.scalars().all():
        # Pickup and dropoff of one student are tracked per stop.
        if rec.route_stop_id:
            attendance[f"{rec.student_id}:{rec.route_stop_id}"] = rec.status
        attendance[rec.student_id] = rec.status

    data = DriverRoutes(
        routes=[RouteResponse.model_validate(r) for r in active],
        stops_map=stops_map,
        attendance=attendance,
        total_route_counts=counts,
    )
    return success_response(data=data.model_dump(mode="json"))


@router.post("/routes/{route_id}/complete")
async def complete_route(route_id: str, payload: RouteCompletionRequest, db: AsyncSession = Depends(get_db)):
    await require_driver(db, payload.driver_id)
    if not await db.get(Route, route_id):
        raise NotFoundError("Route not found")

    now = utcnow()
    today = business_date(now).isoformat()
    result = await db.execute(
        select(RouteCompletion).where(
            RouteCompletion.driver_id == payload.driver_id,
            RouteCompletion.route_id == route_id,
            RouteCompletion.work_date == today,
        )
    )
    completion = result.scalars().first()
    if completion is None:
        completion = RouteCompletion(
            id=str(uuid_mod.uuid4()),
            driver_id=payload.driver_id,
            route_id=route_id,
            work_date=today,
            completed_at=to_storage(now),
        )
        db.add(completion)
        await db.commit()
        logger.info("Driver %s completed route %s on %s", payload.driver_id, route_id, today)

    return success_response(data={"route_id": route_id, "work_date": today, "completed_at": completion.completed_at})


@router.post("/attendance", status_code=201)
async def record_attendance(payload: AttendanceCreate, db: AsyncSession = Depends(get_db)):
    await require_driver(db, payload.driver_id)
    if not await db.get(Student, payload.student_id):
        raise NotFoundError("Student not found")
    if not await db.get(Route, payload.route_id):
        raise NotFoundError("Route not found")

    now = utcnow()
    today = business_date(now).isoformat()

    # Replace only this stop's record so a dropoff never erases the pickup.
    stmt = delete(AttendanceRecord).where(
        AttendanceRecord.student_id == payload.student_id,
        AttendanceRecord.route_id == payload.route_id,
        AttendanceRecord.record_date == today,
    )
    if payload.route_stop_id:
        stmt = stmt.where(AttendanceRecord.route_stop_id == payload.route_stop_id)
    await db.execute(stmt)

    record = AttendanceRecord(
        id=str(uuid_mod.uuid4()),
        student_id=payload.student_id,
        route_id=payload.route_id,
        route_stop_id=payload.route_stop_id,
        household_id=payload.household_id,
        driver_id=payload.driver_id,
        record_date=today,
        status=payload.status,
        recorded_at=to_storage(now),
        latitude=payload.latitude,
        longitude=payload.longitude,
        notes=payload.notes,
    )
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return success_response(data=dump(record, AttendanceResponse))
