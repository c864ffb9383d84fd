"""
Shared datetime helpers.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional


def ensure_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp or epoch milliseconds and normalize it to UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    return ensure_utc(parsed)


def release_day(released_at: datetime) -> date:
    """Calendar day (UTC) a release belongs to."""
    return ensure_utc(released_at).date()


def is_recent(released_at: datetime, now: datetime, days: int) -> bool:
    """True if ``released_at`` falls after ``now - days``."""
    return ensure_utc(released_at) > ensure_utc(now) - timedelta(days=days)
