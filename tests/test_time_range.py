"""
Tests for the half-open TimeRange value object and HH:MM conversions.
"""

from __future__ import annotations

from datetime import date

import pytest

from app.domain.entities.time_range import TimeRange, format_time, parse_date, parse_time
from app.domain.exceptions import InvalidDateFormatError, InvalidRangeError, InvalidTimeFormatError


def test_parse_and_format_time():
    assert parse_time("00:00") == 0
    assert parse_time("09:30") == 570
    assert parse_time("23:59") == 1439
    assert format_time(570) == "09:30"
    assert format_time(parse_time("20:00")) == "20:00"


@pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "12-00", "", "ab:cd", " 09:00"])
def test_parse_time_rejects_malformed(value):
    with pytest.raises(InvalidTimeFormatError):
        parse_time(value)


def test_parse_date():
    assert parse_date("2025-06-10") == date(2025, 6, 10)
    assert parse_date(date(2025, 6, 10)) == date(2025, 6, 10)
    for bad in ("2025-6-10", "10/06/2025", "2025-02-30"):
        with pytest.raises(InvalidDateFormatError):
            parse_date(bad)


def test_construction_rejects_invalid_bounds():
    with pytest.raises(InvalidRangeError):
        TimeRange(600, 600)
    with pytest.raises(InvalidRangeError):
        TimeRange(700, 600)
    with pytest.raises(InvalidRangeError):
        TimeRange(-1, 60)
    with pytest.raises(InvalidRangeError):
        TimeRange(1380, 1440)


def test_adjacent_ranges_do_not_overlap():
    first = TimeRange.from_times("10:00", "11:00")
    second = TimeRange.from_times("11:00", "12:00")
    assert not first.overlaps(second)
    assert not second.overlaps(first)


def test_overlap_and_containment():
    window = TimeRange.from_times("09:00", "12:00")
    booking = TimeRange.from_start("09:30", 60)
    assert booking.overlaps(TimeRange.from_times("09:00", "10:00"))
    assert window.contains(booking)
    assert window.contains(window)
    assert not booking.contains(window)
    assert not window.contains(TimeRange.from_start("11:30", 60))


def test_properties():
    r = TimeRange.from_start("10:00", 120)
    assert r.duration == 120
    assert (r.start_time, r.end_time) == ("10:00", "12:00")
    assert str(r) == "10:00-12:00"
