from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from app.domain.entities.time_range import TimeRange


@dataclass(frozen=True)
class AvailabilityWindow:
    id: str
    doctor_id: str
    date: date
    range: TimeRange
    created_at: datetime | None = None

    @property
    def start_time(self) -> str:
        return self.range.start_time

    @property
    def end_time(self) -> str:
        return self.range.end_time

    def sort_key(self) -> tuple[date, int]:
        return (self.date, self.range.start_minute)
