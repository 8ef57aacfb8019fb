import logging
from datetime import date

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from busops.models.work_session import WorkSession
from busops.schemas.time import WorkSessionRecord
from busops.services.business_calendar import to_storage
from busops.utils.exceptions import ConflictError, NotFoundError, StorageError

logger = logging.getLogger(__name__)


def _to_record(row: WorkSession) -> WorkSessionRecord:
    try:
        return WorkSessionRecord.model_validate(row)
    except SchemaValidationError as exc:
        logger.error("Rejecting malformed work session row %s: %s", row.id, exc)
        raise StorageError(f"Malformed work session {row.id}") from exc


class WorkSessionStore:
    """Reads and writes work sessions without committing.

    The caller owns the transaction. Writes run inside a savepoint so a
    failed insert or update leaves the rest of the caller's unit of work
    intact.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _scalars(self, stmt) -> list[WorkSessionRecord]:
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError("Could not read work sessions") from exc
        return [_to_record(row) for row in result.scalars().all()]

    async def find(self, driver_id: str, work_date: date) -> list[WorkSessionRecord]:
        stmt = (
            select(WorkSession)
            .where(WorkSession.driver_id == driver_id, WorkSession.work_date == work_date.isoformat())
            .order_by(WorkSession.start_time)
        )
        return await self._scalars(stmt)

    async def find_open(self, driver_id: str) -> WorkSessionRecord | None:
        stmt = (
            select(WorkSession)
            .where(WorkSession.driver_id == driver_id, WorkSession.end_time.is_(None))
            .order_by(WorkSession.start_time.desc())
            .limit(1)
        )
        records = await self._scalars(stmt)
        return records[0] if records else None

    async def find_range(self, driver_id: str | None, start: date, end: date) -> list[WorkSessionRecord]:
        stmt = select(WorkSession).where(
            WorkSession.work_date >= start.isoformat(),
            WorkSession.work_date <= end.isoformat(),
        )
        if driver_id is not None:
            stmt = stmt.where(WorkSession.driver_id == driver_id)
        stmt = stmt.order_by(WorkSession.work_date, WorkSession.start_time)
        return await self._scalars(stmt)

    async def find_open_through(self, work_date: date) -> list[WorkSessionRecord]:
        """Open sessions of ``work_date`` and of any earlier day left unclosed."""
        stmt = (
            select(WorkSession)
            .where(WorkSession.work_date <= work_date.isoformat(), WorkSession.end_time.is_(None))
            .order_by(WorkSession.work_date, WorkSession.start_time)
        )
        return await self._scalars(stmt)

    async def insert(self, record: WorkSessionRecord) -> WorkSessionRecord:
        row = WorkSession(
            id=record.id,
            driver_id=record.driver_id,
            work_date=record.work_date.isoformat(),
            start_time=to_storage(record.start_time),
            end_time=to_storage(record.end_time) if record.end_time else None,
            duration_seconds=record.duration_seconds,
        )
        try:
            # A failed write only unwinds to this savepoint; the caller's pending rows survive.
            async with self.db.begin_nested():
                self.db.add(row)
                await self.db.flush()
        except IntegrityError as exc:
            if record.end_time is None and await self.find_open(record.driver_id) is not None:
                raise ConflictError("Driver already has an open work session") from exc
            raise StorageError("Could not save work session") from exc
        except SQLAlchemyError as exc:
            raise StorageError("Could not save work session") from exc
        return _to_record(row)

    async def update(self, record: WorkSessionRecord) -> WorkSessionRecord:
        try:
            row = await self.db.get(WorkSession, record.id)
        except SQLAlchemyError as exc:
            raise StorageError("Could not read work session") from exc
        if row is None:
            raise NotFoundError("Work session not found")
        try:
            async with self.db.begin_nested():
                row.end_time = to_storage(record.end_time) if record.end_time else None
                row.duration_seconds = record.duration_seconds
                await self.db.flush()
        except SQLAlchemyError as exc:
            raise StorageError("Could not save work session") from exc
        return _to_record(row)
