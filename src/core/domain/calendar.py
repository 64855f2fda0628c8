"""
Calendar Rules - pure day-boundary arithmetic.

AICODE-NOTE: All comparisons are on calendar days in ONE canonical timezone
(config.STREAK_TIMEZONE). Aware datetimes are converted to it, naive ones
are assumed to already be in it. No wall clock is read here.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

from src.config import config

DayLike = date | datetime


@lru_cache(maxsize=8)
def _zone(name: str) -> tzinfo:
    return ZoneInfo(name)


def canonical_tz() -> tzinfo:
    """Timezone whose midnight governs streak continuity."""
    return _zone(config.STREAK_TIMEZONE)


def to_day(value: DayLike, tz: tzinfo | None = None) -> date:
    """Normalize a date or datetime to a calendar day."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz or canonical_tz())
        return value.date()
    return value


def same_day(a: DayLike, b: DayLike) -> bool:
    return to_day(a) == to_day(b)


def days_between(earlier: DayLike, later: DayLike) -> int:
    """Number of calendar days from `earlier` to `later` (negative if reversed)."""
    return (to_day(later) - to_day(earlier)).days


def is_yesterday(reference: DayLike, today: DayLike) -> bool:
    """True when `reference` falls on the calendar day before `today`."""
    return days_between(reference, today) == 1


def start_of_day(t: DayLike) -> datetime:
    """Midnight of the day containing `t`, in the canonical timezone."""
    return datetime.combine(to_day(t), time.min, tzinfo=canonical_tz())


def yesterday(now: DayLike) -> date:
    return to_day(now) - timedelta(days=1)


def to_utc(value: datetime) -> datetime:
    """
    Same instant as an aware UTC datetime.

    Stored timestamps are compared as text on SQLite, so every datetime
    handed to a query must carry the same offset.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=canonical_tz())
    return value.astimezone(timezone.utc)
