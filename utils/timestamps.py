#!/usr/bin/env python3
"""
Received-time normalization.

Outlook hands back ReceivedTime in different shapes depending on the COM
bridge and pywin32 version: an aware datetime, a naive datetime, a bare date,
a formatted string, or the raw OLE automation float (days since 1899-12-30).
Everything is converted to an aware datetime in the operator's local zone.

An aware datetime is converted to the local zone (same instant), not
re-tagged. Some pywin32 releases tag Outlook's local wall-clock ReceivedTime
as UTC; such values come out shifted by the local UTC offset.
"""

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional

from dateutil import parser as dt_parser
from dateutil import tz

# OLE automation dates count days from this instant
OLE_EPOCH_UTC = datetime(1899, 12, 30, tzinfo=timezone.utc)

STRING_FORMATS = [
    "%m/%d/%Y %I:%M:%S %p",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
]


def get_local_timezone() -> tzinfo:
    """Return the operator's local timezone."""
    return tz.tzlocal()


def ole_date_to_datetime(value: float, local_tz: tzinfo) -> datetime:
    """Convert an OLE automation date (days since 1899-12-30 UTC) to local time."""
    received_utc = OLE_EPOCH_UTC + timedelta(days=value)
    return received_utc.astimezone(local_tz)


def _parse_string(value: str, local_tz: tzinfo) -> Optional[datetime]:
    text = value.strip()
    for fmt in STRING_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=local_tz)
    return None


def _generic_conversion(value, local_tz: tzinfo) -> Optional[datetime]:
    # COM date wrappers that are not datetime subclasses still expose timestamp()
    if hasattr(value, "timestamp"):
        try:
            return datetime.fromtimestamp(value.timestamp(), tz=local_tz)
        except (TypeError, ValueError, OverflowError, OSError):
            return None
    try:
        parsed = dt_parser.parse(str(value))
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=local_tz)
    return parsed.astimezone(local_tz)


def normalize_received_time(raw, local_tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Convert a raw ReceivedTime value to an aware datetime in ``local_tz``.

    Returns None when the value cannot be interpreted.
    """
    if local_tz is None:
        local_tz = get_local_timezone()

    if raw is None:
        return None

    # datetime first, it is a subclass of date
    if isinstance(raw, datetime):
        if raw.tzinfo is None or raw.tzinfo.utcoffset(raw) is None:
            return raw.replace(tzinfo=local_tz)
        return raw.astimezone(local_tz)

    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day, tzinfo=local_tz)

    if isinstance(raw, str):
        return _parse_string(raw, local_tz)

    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            return ole_date_to_datetime(raw, local_tz)
        except (OverflowError, ValueError):
            return None

    return _generic_conversion(raw, local_tz)
