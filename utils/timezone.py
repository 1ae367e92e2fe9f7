"""UTC-everywhere time handling. Eliminates timezone bugs at the source."""

from datetime import date, datetime, timedelta, timezone


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Raises ValueError if datetime is naive (no timezone).
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime to UTC. Datetime must be timezone-aware."
        )
    return dt.astimezone(timezone.utc)


def assume_utc(dt: datetime) -> datetime:
    """
    Normalize a possibly-naive datetime to UTC.

    Records written by older builds carry local timestamps without an
    offset. Those are read as UTC; aware values are converted.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso(iso_string: str) -> datetime:
    """
    Parse ISO 8601 datetime string to UTC datetime.

    Raises ValueError if string has no timezone info.
    """
    dt = datetime.fromisoformat(iso_string)
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot parse naive datetime string. "
            "Include timezone offset (e.g., 'Z' or '+00:00')."
        )
    return to_utc(dt)


def today_utc() -> date:
    """Current calendar date in UTC."""
    return now_utc().date()


def days_from_now(days: int) -> datetime:
    """UTC timestamp `days` days from now."""
    return now_utc() + timedelta(days=days)


def format_day(dt: datetime) -> str:
    """DD/MM/YYYY, the format used in exported files."""
    return dt.strftime("%d/%m/%Y")
