"""
Clock helpers

All timestamps in the core are timezone-aware UTC datetimes. Services accept
a ``clock`` callable so tests can move time forward without sleeping.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Union

Clock = Callable[[], datetime]

Number = Union[int, float]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string produced by ``datetime.isoformat``."""
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def expiry_from_ttl(ttl_seconds: Optional[Number], now: datetime) -> Optional[datetime]:
    """
    Turn an optional TTL into an absolute expiry.

    Absent or non-positive TTLs mean "never expires".
    """
    if ttl_seconds is None or ttl_seconds <= 0:
        return None
    return now + timedelta(seconds=ttl_seconds)


def is_past(expires_at: Optional[datetime], now: datetime) -> bool:
    """True when an optional expiry has been reached."""
    return expires_at is not None and now >= expires_at
