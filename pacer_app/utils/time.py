"""
Wall-clock time helpers for plan records and event output.

Session timing never uses these functions; elapsed time is computed by the
interval clock from a monotonic source.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current wall-clock time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """
    Format a datetime as ISO8601, treating naive values as UTC.

    Args:
        ts: Timestamp to format

    Returns:
        ISO8601 formatted string
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.isoformat()


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO8601 timestamp, accepting a trailing 'Z' for UTC.

    Args:
        value: ISO8601 string

    Returns:
        Timezone-aware datetime

    Raises:
        ValueError: If the string is not a valid ISO8601 timestamp
    """
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_clock(seconds: Optional[float]) -> str:
    """
    Format a duration in seconds as MM:SS, or H:MM:SS past one hour.

    Negative and missing values render as 00:00.
    """
    if seconds is None or seconds <= 0:
        return "00:00"

    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"
