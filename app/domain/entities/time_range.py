from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from app.domain.exceptions import InvalidDateFormatError, InvalidRangeError, InvalidTimeFormatError

MINUTES_PER_DAY = 1440

TIME_PATTERN = re.compile(r"^([0-1]\d|2[0-3]):([0-5]\d)$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_time(value: str) -> int:
    """Convert an ``HH:MM`` string to minutes since midnight."""
    match = TIME_PATTERN.match(value or "")
    if not match:
        raise InvalidTimeFormatError(f"Invalid time '{value}': expected HH:MM 24-hour format")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_time(minutes: int) -> str:
    """Convert minutes since midnight back to ``HH:MM``."""
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def parse_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    if not DATE_PATTERN.match(value or ""):
        raise InvalidDateFormatError(f"Invalid date '{value}': expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidDateFormatError(f"Invalid date '{value}': expected YYYY-MM-DD")


@dataclass(frozen=True, order=True)
class TimeRange:
    """Half-open interval ``[start_minute, end_minute)`` within a single day."""

    start_minute: int
    end_minute: int

    def __post_init__(self) -> None:
        for bound in (self.start_minute, self.end_minute):
            if not 0 <= bound < MINUTES_PER_DAY:
                raise InvalidRangeError(f"Time bound {bound} is outside the day (0-1439 minutes)")
        if self.start_minute >= self.end_minute:
            raise InvalidRangeError("Start time must be before end time")

    @staticmethod
    def from_times(start_time: str, end_time: str) -> "TimeRange":
        return TimeRange(parse_time(start_time), parse_time(end_time))

    @staticmethod
    def from_start(start_time: str, duration_minutes: int) -> "TimeRange":
        start = parse_time(start_time)
        return TimeRange(start, start + duration_minutes)

    @property
    def duration(self) -> int:
        return self.end_minute - self.start_minute

    @property
    def start_time(self) -> str:
        return format_time(self.start_minute)

    @property
    def end_time(self) -> str:
        return format_time(self.end_minute)

    def overlaps(self, other: "TimeRange") -> bool:
        # adjacent ranges ([a, b) and [b, c)) do not overlap
        return self.start_minute < other.end_minute and other.start_minute < self.end_minute

    def contains(self, inner: "TimeRange") -> bool:
        return inner.start_minute >= self.start_minute and inner.end_minute <= self.end_minute

    def __str__(self) -> str:
        return f"{self.start_time}-{self.end_time}"
