"""Business-date arithmetic shared by the time and route services.

The business day does not have to start at midnight: a driver clocking in at
01:30 with a 03:00 rollover still works on the previous business day.
"""
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from busops.config import settings
from busops.utils.exceptions import ValidationError

WEEKDAY_OFFSETS = {"monday": 0, "sunday": 6}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError(f"Unknown timezone '{name}'") from exc


def require_aware(at: datetime, field: str = "timestamp") -> datetime:
    """Reject naive datetimes and normalise to UTC."""
    if not isinstance(at, datetime):
        raise ValidationError(f"{field} must be a datetime")
    if at.tzinfo is None or at.utcoffset() is None:
        raise ValidationError(f"{field} must include a timezone offset")
    return at.astimezone(timezone.utc)


def business_date(
    at: datetime,
    tz_name: str | None = None,
    rollover: time | None = None,
) -> date:
    at = require_aware(at)
    tz = _zone(tz_name or settings.business_timezone)
    rollover = rollover if rollover is not None else settings.day_rollover
    local = at.astimezone(tz)
    shifted = local - timedelta(hours=rollover.hour, minutes=rollover.minute, seconds=rollover.second)
    return shifted.date()


def day_of_week(day: date) -> int:
    """0 = Sunday .. 6 = Saturday, the convention used by route assignments."""
    return day.isoweekday() % 7


def week_bounds(day: date, starts_on: str | None = None) -> tuple[date, date]:
    starts_on = (starts_on or settings.week_starts_on).lower()
    if starts_on not in WEEKDAY_OFFSETS:
        raise ValidationError("week start must be 'monday' or 'sunday'")
    # Python weekday(): Monday = 0 .. Sunday = 6
    back = (day.weekday() - WEEKDAY_OFFSETS[starts_on]) % 7
    start = day - timedelta(days=back)
    return start, start + timedelta(days=6)


def date_range(start: date, end: date) -> list[date]:
    if end < start:
        raise ValidationError("end date must not be before start date")
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def parse_date(value: str | date | None, field: str = "date") -> date | None:
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"{field} must be a YYYY-MM-DD date") from exc


def to_storage(at: datetime) -> str:
    return require_aware(at).isoformat()


def resolve_week(
    week_start: str | None, week_end: str | None, today: date
) -> tuple[date, date]:
    """Caller-supplied bounds win; with none given use the configured week."""
    start = parse_date(week_start, "week_start")
    end = parse_date(week_end, "week_end")
    if start is None and end is None:
        return week_bounds(today)
    if start is None or end is None:
        raise ValidationError("week_start and week_end must be given together")
    return start, end
