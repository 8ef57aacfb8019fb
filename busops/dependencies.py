from fastapi import Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from busops.config import settings
from busops.models.driver import Driver
from busops.utils.exceptions import NotFoundError, ValidationError


async def verify_api_key(x_api_key: str = Header(default="")) -> None:
    """Gate every /api/v1 route behind the shared access code."""
    if not settings.api_key:
        return
    if x_api_key.strip() != settings.api_key.strip():
        raise HTTPException(status_code=403, detail="Invalid or missing API key")


async def require_driver(db: AsyncSession, driver_id: str) -> Driver:
    if not driver_id or not driver_id.strip():
        raise ValidationError("driver_id is required")
    driver = await db.get(Driver, driver_id.strip())
    if not driver:
        raise NotFoundError("Driver not found")
    return driver
