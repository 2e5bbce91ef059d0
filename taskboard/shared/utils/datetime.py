"""
Datetime utilities for consistent timezone handling.

Timestamps (created_at, updated_at) are stored timezone-aware by the
database. Calendar dates (start_date, due_date) and the task code
year/month are computed in the system zone (settings.timezone).
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo


def system_now(tz_name: str) -> datetime:
    """Return the current time in the configured system zone."""
    return datetime.now(ZoneInfo(tz_name))


def system_today(tz_name: str) -> date:
    """Return today's calendar date in the configured system zone."""
    return system_now(tz_name).date()


def to_system_date(value: date | datetime | None, tz_name: str) -> date | None:
    """
    Normalize a client-supplied date or datetime to a calendar date.

    Aware datetimes are converted to the system zone before taking the date
    (a late-evening UTC instant may fall on the previous day locally).
    Naive datetimes are taken as already local. Plain dates pass through.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(ZoneInfo(tz_name)).date()
    return value
