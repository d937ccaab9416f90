"""
DateTime utilities for consistent timezone handling.
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get the current UTC time with timezone awareness.
    
    Returns:
        datetime: Current UTC time with timezone info
    """
    return datetime.now(timezone.utc)


def to_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to aware UTC. Naive values are assumed to be UTC.
    
    Args:
        dt: Datetime to convert, may be None
    
    Returns:
        datetime: Datetime in UTC timezone, or None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as ISO 8601 in UTC."""
    normalized = to_utc(dt)
    return normalized.isoformat() if normalized else None


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 string produced by format_iso."""
    if not value:
        return None
    return to_utc(datetime.fromisoformat(value))
