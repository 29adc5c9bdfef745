from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SlotStatus(str, Enum):
    UNAVAILABLE = "unavailable"
    AVAILABLE = "available"
    RESERVED = "reserved"
    MINE_PENDING = "mine-pending"
    MINE_ACCEPTED = "mine-accepted"


@dataclass(frozen=True)
class SlotView:
    start_time: str
    end_time: str
    status: SlotStatus
    booking_id: str | None = None  # only set for the viewer's own bookings
