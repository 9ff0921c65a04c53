"""Business-day helpers shared by duplicate detection and the daily counter."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

from orderdesk.config import get_settings


def reference_tz() -> tzinfo | None:
    """Timezone that defines 'today' (``clock.timezone`` setting).

    ``None`` stands for the host's local zone, whose offset depends on the date.
    """
    name = get_settings().clock.timezone
    if not name or name == "local":
        return None
    return ZoneInfo(name)


def as_utc(value: datetime) -> datetime:
    """Normalise a datetime to aware UTC; naive values are taken as UTC (SQLite round-trip)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _midnight(day: date, tz: tzinfo | None) -> datetime:
    if tz is None:
        # A naive datetime is read as host local time, using the rules in force on that day.
        return datetime.combine(day, time.min).astimezone(timezone.utc)
    return datetime.combine(day, time.min, tzinfo=tz).astimezone(timezone.utc)


def start_of_today(now: datetime | None = None, tz: tzinfo | None = None) -> datetime:
    """Local midnight of ``now`` in the reference timezone, returned in UTC."""
    tz = tz or reference_tz()
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    return _midnight(now.astimezone(tz).date(), tz)


def day_start(day: date, tz: tzinfo | None = None) -> datetime:
    """Local midnight at the start of calendar ``day``, returned in UTC."""
    return _midnight(day, tz or reference_tz())


def day_end(day: date, tz: tzinfo | None = None) -> datetime:
    """Last instant of calendar ``day`` in the reference timezone, returned in UTC."""
    return day_start(day + timedelta(days=1), tz) - timedelta(microseconds=1)
