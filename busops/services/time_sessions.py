"""Work-session bookkeeping driven by pre-trip and post-trip checklists.

A pre-trip submission opens a session, a post-trip submission closes the most
recent open one. Daily and weekly totals are derived from the closed
durations plus, for a still-open session, the time elapsed at query time.
"""
import logging
import uuid
from collections import defaultdict
from datetime import date, datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from busops.schemas.time import DaySummary, LiveSession, WeekSummary, WorkSessionRecord
from busops.services.business_calendar import business_date, date_range, require_aware, utcnow
from busops.services.session_store import WorkSessionStore
from busops.utils.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _require_driver_id(driver_id: str | None) -> str:
    if driver_id is None or not str(driver_id).strip():
        raise ValidationError("driver_id is required")
    return str(driver_id).strip()


def summarize_day(
    driver_id: str,
    work_date: date,
    sessions: list[WorkSessionRecord],
    now: datetime,
) -> DaySummary:
    closed = 0
    live = 0
    active_since = None
    for s in sessions:
        if s.work_date != work_date:
            continue
        if s.is_open:
            live += s.elapsed_seconds(now)
            active_since = s.start_time
        else:
            closed += s.duration_seconds or 0
    return DaySummary(
        driver_id=driver_id,
        work_date=work_date,
        closed_seconds=closed,
        total_seconds=closed + live,
        active_since=active_since,
    )


class TimeSessionAggregator:
    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.store = WorkSessionStore(db)
        self.clock = clock

    def _now(self, at: datetime | None) -> datetime:
        return require_aware(at if at is not None else self.clock(), "at")

    async def start_session(self, driver_id: str, at: datetime | None = None) -> WorkSessionRecord:
        """Open a session; raises ConflictError while another one is open.

        The existence check is the store's unique index on open sessions, so two
        concurrent starts cannot both succeed.
        """
        driver_id = _require_driver_id(driver_id)
        at = self._now(at)
        record = WorkSessionRecord(
            id=str(uuid.uuid4()),
            driver_id=driver_id,
            work_date=business_date(at),
            start_time=at,
        )
        try:
            saved = await self.store.insert(record)
        except ConflictError:
            logger.info("Driver %s already clocked in, start at %s refused", driver_id, at.isoformat())
            raise
        logger.info("Opened work session %s for driver %s (%s)", saved.id, driver_id, saved.work_date)
        return saved

    async def end_session(self, driver_id: str, at: datetime | None = None) -> WorkSessionRecord:
        driver_id = _require_driver_id(driver_id)
        at = self._now(at)
        current = await self.store.find_open(driver_id)
        if current is None:
            raise NotFoundError("No active session to close")

        # Clock skew can put the close before the open; never record a negative duration.
        end = max(at, current.start_time)
        closed = current.model_copy(
            update={"end_time": end, "duration_seconds": int((end - current.start_time).total_seconds())}
        )
        saved = await self.store.update(closed)
        logger.info(
            "Closed work session %s for driver %s after %ss", saved.id, driver_id, saved.duration_seconds
        )
        return saved

    async def daily_total(self, driver_id: str, work_date: date, now: datetime | None = None) -> DaySummary:
        driver_id = _require_driver_id(driver_id)
        now = self._now(now)
        sessions = await self.store.find(driver_id, work_date)
        return summarize_day(driver_id, work_date, sessions, now)

    async def weekly_total(
        self,
        driver_id: str,
        week_start: date,
        week_end: date,
        now: datetime | None = None,
    ) -> WeekSummary:
        driver_id = _require_driver_id(driver_id)
        now = self._now(now)
        days = date_range(week_start, week_end)
        sessions = await self.store.find_range(driver_id, week_start, week_end)
        by_day: dict[date, list[WorkSessionRecord]] = defaultdict(list)
        for s in sessions:
            by_day[s.work_date].append(s)
        summaries = [summarize_day(driver_id, d, by_day[d], now) for d in days]
        return WeekSummary(
            driver_id=driver_id,
            week_start=week_start,
            week_end=week_end,
            days=summaries,
            total_seconds=sum(d.total_seconds for d in summaries),
        )

    async def sessions_between(
        self, driver_id: str | None, start: date, end: date
    ) -> list[WorkSessionRecord]:
        date_range(start, end)
        if driver_id is not None:
            driver_id = _require_driver_id(driver_id)
        return await self.store.find_range(driver_id, start, end)

    async def live_sessions(self, now: datetime | None = None) -> list[LiveSession]:
        """Today's open sessions plus any left open on an earlier day.

        A session still open from a past business date blocks the driver's
        next start, so it is listed with ``stale`` set for the office to close.
        """
        now = self._now(now)
        today = business_date(now)
        sessions = await self.store.find_open_through(today)
        return [
            LiveSession(
                id=s.id,
                driver_id=s.driver_id,
                work_date=s.work_date,
                start_time=s.start_time,
                elapsed_seconds=s.elapsed_seconds(now),
                stale=s.work_date < today,
            )
            for s in sessions
        ]
