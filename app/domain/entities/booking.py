from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum

from app.domain.entities.actor import Actor
from app.domain.entities.time_range import TimeRange
from app.domain.exceptions import ForbiddenError, InvalidStateTransitionError


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({BookingStatus.REJECTED, BookingStatus.CANCELLED})

# target status -> statuses it may be reached from
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.ACCEPTED: frozenset({BookingStatus.PENDING}),
    BookingStatus.REJECTED: frozenset({BookingStatus.PENDING}),
    BookingStatus.CANCELLED: frozenset({BookingStatus.PENDING, BookingStatus.ACCEPTED}),
}

# statuses that never take part in conflict or duplicate checks
NON_BLOCKING_STATUSES = frozenset({BookingStatus.CANCELLED})


@dataclass(frozen=True)
class Booking:
    id: str
    doctor_id: str
    patient_id: str
    date: date
    range: TimeRange
    status: BookingStatus = BookingStatus.PENDING
    reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def duration(self) -> int:
        return self.range.duration

    @property
    def start_time(self) -> str:
        return self.range.start_time

    @property
    def end_time(self) -> str:
        return self.range.end_time

    def is_participant(self, user_id: str) -> bool:
        return user_id in (self.doctor_id, self.patient_id)

    def transitioned(self, new_status: BookingStatus, actor: Actor, at: datetime | None = None) -> "Booking":
        """Return a copy of this booking moved to ``new_status`` by ``actor``.

        Authorization is checked before the state machine, so a stranger
        always gets ``ForbiddenError`` even on a terminal booking.
        """
        if new_status not in ALLOWED_TRANSITIONS:
            raise InvalidStateTransitionError(f"Bookings cannot be moved to {new_status.value}")

        if new_status == BookingStatus.CANCELLED:
            if not self.is_participant(actor.id):
                raise ForbiddenError("You are not authorized to cancel this booking")
        else:
            verb = "accept" if new_status == BookingStatus.ACCEPTED else "reject"
            if not actor.is_doctor:
                raise ForbiddenError(f"Only doctors can {verb} bookings")
            if actor.id != self.doctor_id:
                raise ForbiddenError(f"You are not authorized to {verb} this booking")

        if self.status not in ALLOWED_TRANSITIONS[new_status]:
            if new_status == BookingStatus.CANCELLED:
                message = "Only pending or accepted bookings can be cancelled"
            else:
                message = "Booking is not in a pending state"
            raise InvalidStateTransitionError(f"{message} (current status: {self.status.value})")

        return replace(self, status=new_status, updated_at=at or datetime.now())
