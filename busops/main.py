import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from busops.config import settings
from busops.database import create_tables, async_session
from busops.dependencies import verify_api_key
from busops.seed import seed_data
from busops.routers.driver_routes import router as driver_routes_router
from busops.routers.inspections import router as inspections_router
from busops.routers.time import router as time_router
from busops.routers.timecards import router as timecards_router
from busops.routers.vehicles import router as vehicles_router
from busops.utils.exceptions import register_exception_handlers

logger = logging.getLogger(__name__)

SERVICE_NAME = "busops-api"
VERSION = "0.1.0"


async def _close_duplicate_open_sessions(conn) -> None:
    """Leave each driver with at most one open session, the newest one.

    Older open rows are closed at their own start time with a zero duration.
    """
    from sqlalchemy import func, select, update
    from busops.models.work_session import WorkSession

    result = await conn.execute(
        select(WorkSession.driver_id)
        .where(WorkSession.end_time.is_(None))
        .group_by(WorkSession.driver_id)
        .having(func.count() > 1)
    )
    for driver_id in result.scalars().all():
        rows = await conn.execute(
            select(WorkSession.id, WorkSession.start_time)
            .where(WorkSession.driver_id == driver_id, WorkSession.end_time.is_(None))
            .order_by(WorkSession.start_time.desc())
        )
        for session_id, start_time in rows.all()[1:]:
            logger.warning("Closing duplicate open work session %s for driver %s", session_id, driver_id)
            await conn.execute(
                update(WorkSession)
                .where(WorkSession.id == session_id)
                .values(end_time=start_time, duration_seconds=0)
            )


async def _run_migrations(bind=None):
    """Add the open-session unique index to databases created before it existed."""
    from sqlalchemy import inspect
    from busops.database import engine
    from busops.models.work_session import OPEN_SESSION_INDEX, WorkSession

    async with (bind or engine).begin() as conn:
        indexes = await conn.run_sync(
            lambda sync_conn: {i["name"] for i in inspect(sync_conn).get_indexes("work_sessions")}
        )
        if OPEN_SESSION_INDEX not in indexes:
            logger.info("Creating %s on work_sessions", OPEN_SESSION_INDEX)
            await _close_duplicate_open_sessions(conn)
            index = next(i for i in WorkSession.__table__.indexes if i.name == OPEN_SESSION_INDEX)
            await conn.run_sync(lambda sync_conn: index.create(sync_conn))
            logger.info("Migration complete: %s created", OPEN_SESSION_INDEX)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level.upper())
    await create_tables()
    await _run_migrations()
    async with async_session() as session:
        await seed_data(session)
    yield


app = FastAPI(
    title="BusOps API",
    description="Driver checklists, work-session timecards and route sheets for school transportation",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

_api_key_dep = [Depends(verify_api_key)]

app.include_router(inspections_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(time_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(timecards_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(driver_routes_router, prefix="/api/v1", dependencies=_api_key_dep)
app.include_router(vehicles_router, prefix="/api/v1", dependencies=_api_key_dep)


@app.get("/health")
async def health_check():
    return {"status": "success", "data": {"service": SERVICE_NAME, "version": VERSION}, "message": None}
