"""
Timezone policy.

Instants are stored as timezone-aware UTC datetimes. Calendar arithmetic
(start + duration, deadline days) is done on naive wall-clock datetimes in the
configured zone and converted only at the storage boundary.
"""

from datetime import date, datetime, time

import pytz

from lesson_market.core.config import settings


def get_timezone(name: str | None = None) -> pytz.BaseTzInfo:
    return pytz.timezone(name) if name else settings.tz


def local_now(tz: pytz.BaseTzInfo | None = None) -> datetime:
    """Current naive wall-clock time in the configured zone."""
    tz = tz or get_timezone()
    return datetime.now(pytz.utc).astimezone(tz).replace(tzinfo=None)


def local_today(tz: pytz.BaseTzInfo | None = None) -> date:
    return local_now(tz).date()


def to_utc(dt: datetime, tz: pytz.BaseTzInfo | None = None) -> datetime:
    """Convert a naive local datetime to an aware UTC instant."""
    tz = tz or get_timezone()
    if dt.tzinfo is None:
        dt = tz.localize(dt)
    return dt.astimezone(pytz.utc)


def to_local(dt: datetime, tz: pytz.BaseTzInfo | None = None) -> datetime:
    """Convert an instant to naive wall-clock time in the configured zone."""
    tz = tz or get_timezone()
    if dt.tzinfo is None:
        # naive values coming back from storage are UTC
        dt = pytz.utc.localize(dt)
    return dt.astimezone(tz).replace(tzinfo=None)


def combine_local(day: date, at: time) -> datetime:
    """Combine a date and a time into a naive wall-clock datetime."""
    return datetime.combine(day, at.replace(tzinfo=None))
