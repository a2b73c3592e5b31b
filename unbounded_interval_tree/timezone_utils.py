"""
Timezone utilities for datetime-keyed interval trees.

Aware datetime endpoints are persisted in UTC, so a tree written on one
machine reads back as the same instants on another. Naive endpoints are
persisted as written and read back naive; use to_utc_datetime to pin them to
a timezone before inserting if they stand for local wall-clock time.
"""

from datetime import datetime
import time as _time
from typing import Optional

import pytz


# None means the system timezone - can be overridden by config
_local_timezone_name: Optional[str] = None


def set_timezone(timezone_name: Optional[str]):
    """Set the local timezone used for naive datetimes (None = system timezone)."""
    global _local_timezone_name
    _local_timezone_name = timezone_name


def _system_timezone():
    try:
        return pytz.timezone(_time.tzname[0])
    except pytz.UnknownTimeZoneError:
        # Last resort: calculate offset and use fixed offset timezone
        is_dst = _time.localtime().tm_isdst
        if is_dst:
            offset_seconds = -_time.altzone
        else:
            offset_seconds = -_time.timezone
        return pytz.FixedOffset(offset_seconds // 60)


def get_local_timezone():
    """
    Get the local timezone as a pytz timezone object.

    Returns:
        pytz timezone object for the configured timezone, or the system
        timezone when none is configured or the name is unknown.
    """
    if _local_timezone_name is not None:
        try:
            return pytz.timezone(_local_timezone_name)
        except pytz.UnknownTimeZoneError:
            pass
    return _system_timezone()


def to_utc_datetime(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Args:
        dt: A datetime object; naive values are taken as local time.

    Returns:
        A timezone-aware datetime in UTC.
    """
    if dt.tzinfo is None:
        local_tz = get_local_timezone()
        local_dt = local_tz.localize(dt)
        return local_dt.astimezone(pytz.UTC)
    return dt.astimezone(pytz.UTC)


def encode_datetime_key(dt: datetime) -> str:
    """Encode a datetime endpoint as ISO-8601 text; aware values in UTC."""
    if not isinstance(dt, datetime):
        raise TypeError(f"Expected a datetime endpoint, got {type(dt).__name__}")
    if dt.tzinfo is None:
        return dt.isoformat()
    return dt.astimezone(pytz.UTC).isoformat()


def decode_datetime_key(text: str) -> datetime:
    """Decode an ISO-8601 endpoint; text without an offset stays naive."""
    if not isinstance(text, str):
        raise ValueError(f"Expected ISO-8601 text, got {text!r}")
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(pytz.UTC)
