"""Timestamp normalization and inclusive day-range filtering.

Every naive civil date/time handled by the service (RFID scan text, visit
date and time, report day bounds) is interpreted in the configured
``TIMEZONE``. Firestore timestamps arrive timezone-aware and are converted
into the same zone, so comparisons are always between aware datetimes.
"""

from datetime import date, datetime, time, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import settings
from app.core.exceptions import BadRequestException
from app.models.scans import ScanSource

# Accepted visit time layouts, tried in order
VISIT_TIME_FORMATS = ("%H:%M", "%H:%M:%S", "%I:%M %p")


class ScanTimestampError(ValueError):
    """A scan row carries a timestamp that cannot be interpreted."""


def get_timezone(name: str | None = None) -> tzinfo:
    """Resolve the configured civil timezone."""
    try:
        return ZoneInfo(name or settings.timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {name or settings.timezone}") from e


def _localize(value: datetime, tz: tzinfo) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def parse_scan_timestamp(raw: str, tz: tzinfo | None = None) -> datetime:
    """
    Parse an RFID scan timestamp of the form ``YYYY-MM-DD HH:MM:SS``.

    Raises:
        ScanTimestampError: On a wrong field count or non-numeric component
    """
    if not isinstance(raw, str):
        raise ScanTimestampError(f"Expected text timestamp, got {type(raw).__name__}")

    parts = raw.split(" ")
    if len(parts) != 2:
        raise ScanTimestampError(f"Malformed timestamp: {raw!r}")
    date_part, time_part = parts

    date_fields = date_part.split("-")
    time_fields = time_part.split(":")
    if len(date_fields) != 3 or len(time_fields) != 3:
        raise ScanTimestampError(f"Malformed timestamp: {raw!r}")

    try:
        year, month, day = (int(field) for field in date_fields)
        hours, minutes, seconds = (int(field) for field in time_fields)
        value = datetime(year, month, day, hours, minutes, seconds)
    except ValueError as e:
        raise ScanTimestampError(f"Malformed timestamp: {raw!r}") from e

    return value.replace(tzinfo=tz or get_timezone())


def normalize(source: ScanSource, raw: Any, tz: tzinfo | None = None) -> datetime:
    """
    Convert a source-specific scan timestamp into an aware datetime.

    Args:
        source: Scan log the value came from
        raw: Stored timestamp value
        tz: Civil timezone (defaults to TIMEZONE)

    Raises:
        ScanTimestampError: If the value cannot be interpreted
    """
    tz = tz or get_timezone()

    if source == ScanSource.RFID:
        return parse_scan_timestamp(raw, tz)

    # Firestore returns DatetimeWithNanoseconds, a datetime subclass
    if isinstance(raw, datetime):
        return _localize(raw, tz)
    raise ScanTimestampError(f"Expected Firestore timestamp, got {type(raw).__name__}")


def day_bounds(
    start_date: str,
    end_date: str,
    tz: tzinfo | None = None,
) -> tuple[datetime, datetime]:
    """
    Expand two ISO dates into the first and last instant of the range.

    Raises:
        BadRequestException: If a date is missing, malformed, or start > end
    """
    tz = tz or get_timezone()
    try:
        start_day = date.fromisoformat(start_date)
        end_day = date.fromisoformat(end_date)
    except (TypeError, ValueError) as e:
        raise BadRequestException("startDate and endDate must be ISO dates (YYYY-MM-DD)") from e

    if start_day > end_day:
        raise BadRequestException("startDate must not be after endDate")

    return (
        datetime.combine(start_day, time.min, tzinfo=tz),
        datetime.combine(end_day, time.max, tzinfo=tz),
    )


def in_range(instant: datetime, start: datetime, end: datetime) -> bool:
    """Check containment, inclusive at both bounds."""
    return start <= instant <= end


def parse_visit_datetime(visit_date: str, visit_time: str, tz: tzinfo | None = None) -> datetime:
    """
    Combine a stored visit date and time into an aware datetime.

    Accepts ``YYYY-MM-DD`` with ``HH:MM``, ``HH:MM:SS`` or ``h:MM AM/PM``.

    Raises:
        ValueError: If either part does not match an accepted layout
    """
    tz = tz or get_timezone()
    visit_day = date.fromisoformat(visit_date.strip())

    cleaned = visit_time.strip().upper()
    for fmt in VISIT_TIME_FORMATS:
        try:
            visit_clock = datetime.strptime(cleaned, fmt).time()
        except ValueError:
            continue
        return datetime.combine(visit_day, visit_clock, tzinfo=tz)

    raise ValueError(f"Unrecognized visit time: {visit_time!r}")
