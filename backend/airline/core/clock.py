"""
UTC time helpers.

All timestamps are stored in UTC. Some drivers (SQLite) hand back naive
datetimes, so values read from the database go through as_utc() before
being compared with utcnow().
"""

from datetime import date, datetime, timezone
from typing import Optional, Union


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse an ISO date (or datetime) string. Returns None when invalid."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def age_on(dob: date, today: Optional[date] = None) -> int:
    today = today or utcnow().date()
    return today.year - dob.year - ((today.month, today.day) < (dob.month, dob.day))


def format_duration(start: datetime, end: datetime) -> str:
    minutes = int((as_utc(end) - as_utc(start)).total_seconds() // 60)
    return f"{minutes // 60}h {minutes % 60}m"
