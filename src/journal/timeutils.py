# src/journal/timeutils.py
"""Timestamp helpers.

All timestamps held by the model are timezone-aware. Naive input is read
as local time. Values that cannot be placed on the UTC timeline (for
example the first hours of year 1 seen from a positive offset) are
treated as malformed.
"""
from datetime import datetime, timezone, tzinfo


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 string or datetime into an aware datetime.

    Returns None for empty, unparseable or out-of-range input instead of
    raising.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    try:
        if dt.tzinfo is None:
            dt = dt.astimezone()
        dt.astimezone(timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None
    return dt


def format_timestamp(value: datetime | None) -> str | None:
    """Serialize a timestamp to ISO-8601, keeping its offset."""
    return value.isoformat() if value is not None else None


def to_local(value: datetime, tz: tzinfo | None = None) -> datetime:
    """Convert to the display timezone (system local when tz is None).

    A value the target zone cannot represent is returned unchanged.
    """
    try:
        return value.astimezone(tz)
    except (ValueError, OverflowError, OSError):
        return value


def date_label(value: datetime | None, tz: tzinfo | None = None) -> str:
    """Calendar date used by the log search and the daily calendar."""
    if value is None:
        return ""
    return to_local(value, tz).strftime("%Y-%m-%d")


def to_wall_clock(value: datetime, tz: tzinfo | None = None) -> datetime:
    """Naive date and time as shown to the user in ``tz``, for form widgets."""
    return to_local(value, tz).replace(tzinfo=None)


def from_wall_clock(value: datetime, tz: tzinfo | None = None) -> datetime:
    """Read a naive form value as wall-clock time in ``tz`` (system local when None)."""
    if value.tzinfo is not None:
        return value
    if tz is None:
        return value.astimezone()
    return value.replace(tzinfo=tz)
