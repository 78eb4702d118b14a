"""Date manipulation utilities"""

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def window_start(now: datetime, window_seconds: int) -> datetime:
    """Earliest instant still inside a trailing window ending at `now`"""
    return now - timedelta(seconds=window_seconds)
