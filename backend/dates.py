"""
dates.py — Calendar helpers.
Every "day" in the app is a calendar date in APP_TIMEZONE; callers pass `now`
explicitly so nothing here reads the wall clock on its own.
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from config import APP_TIMEZONE

REFERENCE_TZ = ZoneInfo(APP_TIMEZONE)

WINDOW_DAYS = {
    "week": 7,
    "month": 30,
    "year": 365,
}
DEFAULT_WINDOW = "week"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_day(moment: datetime | date) -> date:
    """Truncate a moment to its calendar day in the reference timezone."""
    if isinstance(moment, datetime):
        if moment.tzinfo is None:
            # naive datetimes are stored/handled as UTC throughout the app
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(REFERENCE_TZ).date()
    return moment


def day_bounds(moment: datetime | date) -> tuple[date, date]:
    """[start-of-day, start-of-next-day) for the day containing `moment`."""
    d = to_day(moment)
    return d, d + timedelta(days=1)


def previous_day(moment: datetime | date) -> date:
    return to_day(moment) - timedelta(days=1)


def window_days(period: str | None) -> int:
    """Lookback length for an aggregation window; unknown values mean a week."""
    return WINDOW_DAYS.get(period or DEFAULT_WINDOW, WINDOW_DAYS[DEFAULT_WINDOW])


def window_start(period: str | None, now: datetime) -> date:
    return to_day(now) - timedelta(days=window_days(period))


def as_utc(moment: datetime | None) -> datetime | None:
    """SQLite hands datetimes back naive; treat those as UTC."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def current_time() -> datetime:
    """FastAPI dependency — the request's notion of "now" (overridable in tests)."""
    return utcnow()
