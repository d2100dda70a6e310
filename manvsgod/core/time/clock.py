"""
Unified clock for Man vs God

Rules:
1. Internal time is always aware UTC
2. Do not call datetime.now() / datetime.utcnow() directly
3. Get the time through this module (or an injected clock callable)

Timestamp contract:
- Storage: aware UTC datetime or epoch_ms
- API transport: ISO 8601 UTC with Z suffix
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Current UTC time (timezone-aware)

    Example:
        >>> now = utc_now()
        >>> now.tzinfo  # timezone.utc
    """
    return datetime.now(timezone.utc)


def utc_now_ms() -> int:
    """Current UTC time as epoch milliseconds"""
    return int(utc_now().timestamp() * 1000)


def utc_now_iso() -> str:
    """
    Current UTC time as ISO 8601 with Z suffix

    Example:
        >>> utc_now_iso()
        '2026-01-31T12:34:56.789012Z'
    """
    return iso_z(utc_now())


def iso_z(dt: datetime) -> str:
    """Format a datetime as ISO 8601 UTC with Z suffix (naive values are taken as UTC)"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%fZ')


def from_epoch_ms(ms: int) -> datetime:
    """
    Epoch milliseconds to aware UTC datetime

    Example:
        >>> from_epoch_ms(1769860800000).year
        2026
    """
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


def to_epoch_ms(dt: datetime) -> int:
    """
    Datetime to epoch milliseconds

    Note:
        Naive datetimes are declared UTC, not converted.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)
