"""
Timezone-aware datetime helpers.
- Store and compute instants in UTC.
- Work dates and time-of-day cutoffs are evaluated in the configured zone (settings.OFFICE_TZ).
- API responses expose datetimes with the local offset (e.g. +07:00 for WIB); never Z.
"""
from datetime import date, datetime, time, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

UTC = timezone.utc

ZoneLike = Union[str, ZoneInfo, None]


def get_zone(tz: ZoneLike = None) -> ZoneInfo:
    """Resolve a zone name (or None for settings.OFFICE_TZ) to a ZoneInfo."""
    if isinstance(tz, ZoneInfo):
        return tz
    if tz is None:
        from presence.core.config import settings
        tz = settings.OFFICE_TZ
    return ZoneInfo(tz)


def now_utc() -> datetime:
    """Current time in UTC (timezone-aware)."""
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """If dt is naive, treat as UTC and return timezone-aware UTC. If already aware, convert to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_local(dt: Optional[datetime], tz: ZoneLike = None) -> Optional[datetime]:
    """Convert to the local zone. Naive datetimes are treated as UTC before converting."""
    if dt is None:
        return None
    return ensure_utc(dt).astimezone(get_zone(tz))


def local_date(dt: datetime, tz: ZoneLike = None) -> date:
    """Calendar date of dt in the local zone."""
    return to_local(dt, tz).date()


def iso_local(dt: Optional[datetime], tz: ZoneLike = None) -> Optional[str]:
    """ISO-8601 in the local zone with its offset."""
    if dt is None:
        return None
    return to_local(dt, tz).isoformat()


def parse_hhmm(value: str) -> time:
    """Parse a 24h "HH:MM" string into a time."""
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def local_at(day: date, at: time, tz: ZoneLike = None) -> datetime:
    """Aware datetime for wall-clock `at` on `day` in the local zone."""
    return datetime.combine(day, at, tzinfo=get_zone(tz))
