"""Time helpers shared by the store layer and the statistics service."""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

# Sorts before every real review timestamp.
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_timezone(name: str) -> tzinfo:
    """Look up an IANA zone name, e.g. ``Europe/Berlin``."""

    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def local_day_bounds(now: datetime, tz: tzinfo) -> tuple[datetime, datetime]:
    """Return ``[start_of_day, start_of_next_day)`` for ``now`` in ``tz``, as UTC."""

    local_day = as_utc(now).astimezone(tz).date()
    start = datetime.combine(local_day, time.min, tzinfo=tz)
    end = datetime.combine(local_day + timedelta(days=1), time.min, tzinfo=tz)
    return as_utc(start), as_utc(end)


def local_date(value: datetime, tz: tzinfo) -> date:
    return as_utc(value).astimezone(tz).date()
