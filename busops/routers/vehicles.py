from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from busops.database import get_db
from busops.models.vehicle import Vehicle
from busops.schemas.vehicle import VehicleResponse
from busops.utils.response import dump_all, success_response

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.get("")
async def get_vehicles(
    active_only: bool = Query(default=False),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(Vehicle).order_by(Vehicle.label))
    vehicles = result.scalars().all()
    if active_only:
        vehicles = [v for v in vehicles if v.is_active]
    return success_response(data=dump_all(vehicles, VehicleResponse))
