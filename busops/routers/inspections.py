import logging
import uuid as uuid_mod
from datetime import timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from busops.config import settings
from busops.database import get_db
from busops.dependencies import require_driver
from busops.models.inspection import Inspection
from busops.models.vehicle import Vehicle
from busops.schemas.inspection import (
    InspectionCreate,
    InspectionResponse,
    InspectionResult,
    InspectionSummary,
)
from busops.services.business_calendar import business_date, parse_date, to_storage, utcnow
from busops.services.time_sessions import TimeSessionAggregator
from busops.utils.exceptions import ConflictError, NotFoundError, ValidationError
from busops.utils.response import dump, dump_all, success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inspections", tags=["inspections"])


@router.post("", status_code=201)
async def submit_inspection(payload: InspectionCreate, db: AsyncSession = Depends(get_db)):
    driver = await require_driver(db, payload.driver_id)
    vehicle = await db.get(Vehicle, payload.vehicle_id)
    if not vehicle:
        raise NotFoundError("Vehicle not found")

    now = utcnow()
    inspection = Inspection(
        id=str(uuid_mod.uuid4()),
        driver_id=payload.driver_id,
        driver_name=payload.driver_name or driver.full_name,
        driver_license_number=payload.driver_license_number or driver.license_number,
        vehicle_id=payload.vehicle_id,
        vehicle_label=payload.vehicle_label or vehicle.label,
        inspection_type=payload.inspection_type,
        shift=payload.shift,
        answers=payload.answers,
        overall_status=payload.overall_status,
        notes=payload.notes,
        signature_name=payload.signature_name,
        odometer_reading=payload.odometer_reading,
        inspection_date=business_date(now).isoformat(),
        submitted_at=to_storage(now),
    )
    aggregator = TimeSessionAggregator(db)

    if payload.inspection_type == "post":
        # Close first: with no open session nothing is written at all.
        session = await aggregator.end_session(payload.driver_id, now)
        db.add(inspection)
        action = "closed"
    else:
        db.add(inspection)
        try:
            session = await aggregator.start_session(payload.driver_id, now)
            action = "opened"
        except ConflictError:
            session = await aggregator.store.find_open(payload.driver_id)
            action = "already_open"

    # Inspection and session change land in one commit.
    await db.commit()
    await db.refresh(inspection)
    result = InspectionResult(
        inspection=InspectionResponse.model_validate(inspection),
        session=session,
        session_action=action,
    )
    logger.info("Recorded %s-trip inspection %s for driver %s", payload.inspection_type, inspection.id, payload.driver_id)
    return success_response(data=result.model_dump(mode="json"))


@router.get("")
async def inspection_history(
    driver_id: str | None = Query(default=None),
    driver_name: str | None = Query(default=None),
    date: str | None = Query(default=None),
    type: str | None = Query(default=None),
    shift: str | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    if not driver_id and not driver_name:
        raise ValidationError("driver_id or driver_name is required")

    stmt = select(Inspection).order_by(Inspection.submitted_at.desc())
    if driver_id:
        stmt = stmt.where(Inspection.driver_id == driver_id)
    else:
        stmt = stmt.where(Inspection.driver_name == driver_name)

    if date:
        stmt = stmt.where(Inspection.inspection_date == parse_date(date).isoformat())
    else:
        since = utcnow() - timedelta(days=settings.inspection_history_days)
        stmt = stmt.where(Inspection.submitted_at >= to_storage(since))

    if type:
        stmt = stmt.where(Inspection.inspection_type == type)
    if shift:
        stmt = stmt.where(Inspection.shift == shift)

    result = await db.execute(stmt)
    return success_response(data=dump_all(result.scalars().all(), InspectionSummary))


@router.get("/{inspection_id}")
async def get_inspection(inspection_id: str, db: AsyncSession = Depends(get_db)):
    inspection = await db.get(Inspection, inspection_id)
    if not inspection:
        raise NotFoundError("Inspection not found")
    return success_response(data=dump(inspection, InspectionResponse))
