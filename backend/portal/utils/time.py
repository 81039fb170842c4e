"""Time Utilities - UTC timestamps and formatting"""
from datetime import datetime, timezone
from typing import Optional
from dateutil.relativedelta import relativedelta


def utc_now() -> datetime:
    """Get current UTC datetime"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to an aware UTC value.

    MongoDB hands back naive datetimes unless the client is tz-aware;
    naive values are taken to be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 string

    Args:
        dt: Datetime object

    Returns:
        ISO formatted string with Z suffix for UTC
    """
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")


def add_years(dt: datetime, years: int) -> datetime:
    """Add calendar years (29 February rolls back to 28 February)"""
    return dt + relativedelta(years=years)


def hours_since(dt: datetime, now: Optional[datetime] = None) -> float:
    """
    Hours elapsed since the given datetime

    Returns:
        Positive if in past, negative if in future
    """
    now = ensure_utc(now or utc_now())
    return (now - ensure_utc(dt)).total_seconds() / 3600


def format_long_date(dt: datetime) -> str:
    """Format a date for citizen-facing messages (e.g. 'January 01, 2030')"""
    return ensure_utc(dt).strftime("%B %d, %Y")
