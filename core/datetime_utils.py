# core/datetime_utils.py
"""
Centralized datetime handling for TaskHub.

Stored timestamps are ISO 8601 UTC strings with microseconds, so they sort
lexicographically in the same order as in time.
"""
from datetime import date, datetime, timezone as dt_timezone
from typing import Optional

from django.utils import timezone


def now() -> datetime:
    """Current timezone-aware datetime; the single source of truth for "now"."""
    return timezone.now()


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt, dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc).isoformat(timespec="microseconds")


def now_iso() -> str:
    return to_iso(now())


def parse_date(value) -> Optional[date]:
    """Parse a stored ``YYYY-MM-DD`` due date; returns None for blanks/garbage."""
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None
