"""
Timezone-aware datetime helpers.
- Store and compare in UTC in the DB.
- Work dates, schedules and lateness use the business timezone (settings.TZ).
- API responses expose datetimes in the business timezone with its offset.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from tkms.core.config import settings
from tkms.core.constants import WEEKDAYS

UTC = timezone.utc
LOCAL_TZ = ZoneInfo(settings.TZ)


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


def to_local(dt: Optional[datetime]) -> Optional[datetime]:
    """Convert to the business timezone. Naive datetimes are treated as UTC."""
    if dt is None:
        return None
    return ensure_utc(dt).astimezone(LOCAL_TZ)


def iso_local(dt: Optional[datetime]) -> Optional[str]:
    """Serialize as ISO-8601 in the business timezone (explicit offset, never Z)."""
    if dt is None:
        return None
    return to_local(dt).isoformat()


def local_date(dt: datetime) -> date:
    """Calendar date of an instant in the business timezone"""
    return to_local(dt).date()


def local_today() -> date:
    """Today's date in the business timezone"""
    return local_date(now_utc())


def weekday_name(day: date) -> str:
    """'monday' .. 'sunday'"""
    return WEEKDAYS[day.weekday()]


def combine_local(day: date, hhmm: str) -> datetime:
    """Build a UTC instant from a local calendar date and an HH:mm string."""
    hours, minutes = (int(part) for part in hhmm.split(":"))
    local = datetime.combine(day, time(hours, minutes), tzinfo=LOCAL_TZ)
    return local.astimezone(UTC)


def local_day_bounds(day: date) -> Tuple[datetime, datetime]:
    """UTC [start, end) instants covering a local calendar day"""
    start = datetime.combine(day, time.min, tzinfo=LOCAL_TZ)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=LOCAL_TZ)
    return start.astimezone(UTC), end.astimezone(UTC)


def parse_date(value: str) -> date:
    """Parse YYYY-MM-DD (also accepts a full ISO timestamp and keeps its date part)."""
    return date.fromisoformat(value[:10])
