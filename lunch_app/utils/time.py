"""Clock and local-zone helpers.

Timestamps are stored in UTC. Serve dates are calendar dates in the configured
local zone, so "today" and "end of serve day" are resolved there.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from lunch_app.core.config import settings


def utc_now() -> datetime:
    """Return the current aware UTC timestamp."""
    return datetime.now(timezone.utc)


def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.local_timezone)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC (SQLite drops tzinfo on round-trip)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_utc(value: datetime | None) -> datetime | None:
    """Normalize a timestamp to UTC before storage."""
    if value is None:
        return None
    return ensure_aware(value).astimezone(timezone.utc)


def assume_local(value: datetime) -> datetime:
    """Attach the local zone to wall-clock input such as an admin form value."""
    if value.tzinfo is None:
        return value.replace(tzinfo=local_zone())
    return value


def local_today(now: datetime) -> date:
    """Return the local calendar date for an instant."""
    return ensure_aware(now).astimezone(local_zone()).date()


def end_of_local_day(day: date) -> datetime:
    """Return the last representable instant of ``day`` in the local zone."""
    return datetime.combine(day, time.max, tzinfo=local_zone())
