from datetime import date, datetime, timezone
from typing import Literal

from pydantic import BaseModel, field_validator, model_validator


class WorkSessionRecord(BaseModel):
    """The one shape a work session takes once it leaves the store."""

    id: str
    driver_id: str
    work_date: date
    start_time: datetime
    end_time: datetime | None = None
    duration_seconds: int | None = None

    model_config = {"from_attributes": True}

    @field_validator("driver_id")
    @classmethod
    def _driver_id_present(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("driver_id must not be empty")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            # Rows written before offsets were stored are UTC.
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def _consistent_duration(self) -> "WorkSessionRecord":
        if self.end_time is None:
            self.duration_seconds = None
            return self
        if self.end_time < self.start_time:
            raise ValueError("end_time precedes start_time")
        self.duration_seconds = int((self.end_time - self.start_time).total_seconds())
        return self

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    def elapsed_seconds(self, now: datetime) -> int:
        end = self.end_time or now
        return max(0, int((end - self.start_time).total_seconds()))


class TimeAction(BaseModel):
    driver_id: str
    action: Literal["pause", "resume"]


class DaySummary(BaseModel):
    driver_id: str
    work_date: date
    closed_seconds: int
    total_seconds: int
    active_since: datetime | None = None


class WeekSummary(BaseModel):
    driver_id: str
    week_start: date
    week_end: date
    days: list[DaySummary]
    total_seconds: int


class LiveSession(BaseModel):
    id: str
    driver_id: str
    work_date: date
    start_time: datetime
    elapsed_seconds: int
    stale: bool = False
