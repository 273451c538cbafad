"""Tests for timestamp normalization and day-range filtering."""

from datetime import UTC, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from app.core.exceptions import BadRequestException
from app.core.time_window import (
    ScanTimestampError,
    day_bounds,
    in_range,
    normalize,
    parse_scan_timestamp,
    parse_visit_datetime,
)
from app.models.scans import ScanSource


def test_parse_scan_timestamp():
    """Text timestamps map month 1-based input to the same calendar month."""
    value = parse_scan_timestamp("2024-01-31 23:59:59", UTC)
    assert value == datetime(2024, 1, 31, 23, 59, 59, tzinfo=UTC)


@pytest.mark.parametrize(
    "raw",
    [
        "2024-01-01",
        "2024-01-01T00:00:00",
        "2024-01-01  00:00:00",
        "2024-01 00:00:00",
        "2024-01-01 00:00",
        "2024-aa-01 00:00:00",
        "2024-13-01 00:00:00",
        "",
        None,
        1704067200,
    ],
)
def test_parse_scan_timestamp_rejects_malformed(raw):
    """Wrong field counts and non-numeric parts raise ScanTimestampError."""
    with pytest.raises(ScanTimestampError):
        parse_scan_timestamp(raw, UTC)


def test_normalize_rfid_uses_configured_zone():
    """RFID text is civil time in the configured zone."""
    manila = ZoneInfo("Asia/Manila")
    value = normalize(ScanSource.RFID, "2024-01-01 08:00:00", manila)
    assert value.tzinfo == manila
    assert value.astimezone(UTC) == datetime(2024, 1, 1, 0, 0, tzinfo=UTC)


def test_normalize_qrcode_converts_aware_timestamp():
    """Firestore timestamps are converted into the configured zone."""
    manila = ZoneInfo("Asia/Manila")
    scanned_at = datetime(2024, 1, 1, 16, 30, tzinfo=UTC)
    value = normalize(ScanSource.QRCODE, scanned_at, manila)
    assert value == scanned_at
    assert value.tzinfo == manila
    assert value.day == 2


def test_normalize_qrcode_naive_is_civil_time():
    """A naive datetime is taken as civil time in the configured zone."""
    value = normalize(ScanSource.QRCODE, datetime(2024, 1, 1, 12, 0), UTC)
    assert value == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


def test_normalize_qrcode_rejects_text():
    """QR scans must carry a timestamp, not text."""
    with pytest.raises(ScanTimestampError):
        normalize(ScanSource.QRCODE, "2024-01-01 00:00:00", UTC)


def test_day_bounds_cover_whole_days():
    """Bounds run from midnight of the first day to the last microsecond of the last."""
    start, end = day_bounds("2024-01-01", "2024-01-03", UTC)
    assert start == datetime(2024, 1, 1, 0, 0, 0, 0, tzinfo=UTC)
    assert end == datetime(2024, 1, 3, 23, 59, 59, 999999, tzinfo=UTC)


@pytest.mark.parametrize(
    ("start", "end"),
    [(None, "2024-01-01"), ("2024-01-01", None), ("01/01/2024", "2024-01-02"), ("2024-01-02", "2024-01-01")],
)
def test_day_bounds_rejects_bad_input(start, end):
    """Missing, malformed or inverted dates are client errors."""
    with pytest.raises(BadRequestException):
        day_bounds(start, end, UTC)


def test_in_range_is_inclusive_at_both_bounds():
    """Exact bounds are inside; one microsecond outside either bound is not."""
    start, end = day_bounds("2024-01-01", "2024-01-01", UTC)
    tick = timedelta(microseconds=1)

    assert in_range(start, start, end)
    assert in_range(end, start, end)
    assert not in_range(start - tick, start, end)
    assert not in_range(end + tick, start, end)


def test_in_range_compares_across_zones():
    """Aware instants compare by absolute time."""
    start, end = day_bounds("2024-01-01", "2024-01-01", UTC)
    plus_two = timezone(timedelta(hours=2))
    assert in_range(datetime(2024, 1, 2, 1, 0, tzinfo=plus_two), start, end)
    assert not in_range(datetime(2024, 1, 2, 2, 0, tzinfo=plus_two), start, end)


@pytest.mark.parametrize(
    ("visit_time", "expected"),
    [
        ("14:30", datetime(2024, 5, 10, 14, 30, tzinfo=UTC)),
        ("14:30:15", datetime(2024, 5, 10, 14, 30, 15, tzinfo=UTC)),
        ("2:30 PM", datetime(2024, 5, 10, 14, 30, tzinfo=UTC)),
        ("9:05 am", datetime(2024, 5, 10, 9, 5, tzinfo=UTC)),
    ],
)
def test_parse_visit_datetime(visit_time, expected):
    """Accepted visit time layouts."""
    assert parse_visit_datetime("2024-05-10", visit_time, UTC) == expected


@pytest.mark.parametrize(
    ("visit_date", "visit_time"),
    [("2024-05-10", "half past two"), ("2024-05-10", "25:00"), ("May 10 2024", "14:30")],
)
def test_parse_visit_datetime_rejects_unknown_layouts(visit_date, visit_time):
    """Anything outside the accepted layouts raises ValueError."""
    with pytest.raises(ValueError):
        parse_visit_datetime(visit_date, visit_time, UTC)
