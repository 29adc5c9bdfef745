from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from app.application.ports.availability_store import AvailabilityStorePort
from app.application.ports.booking_store import BookingStorePort
from app.application.ports.doctor_directory import DoctorDirectoryPort
from app.application.use_cases.dispatch_notification import NotificationDispatcher
from app.application.utils.scope_locks import ScopeLocks
from app.domain.entities.actor import Actor
from app.domain.entities.availability_window import AvailabilityWindow
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.notification import Notification
from app.domain.entities.time_range import MINUTES_PER_DAY, TimeRange, parse_time
from app.domain.exceptions import (
    DateTooFarError,
    DoctorUnavailableError,
    DuplicateBookingError,
    ForbiddenError,
    InvalidDurationError,
    InvalidRangeError,
    NoAvailabilityError,
    NotFoundError,
    OutOfBusinessHoursError,
    OutsideAvailabilityError,
    OverlapError,
    PastDateError,
    SchedulingError,
    SlotConflictError,
)

BOOKING_STATUS_NOTIFICATION = "BOOKING_STATUS"


@dataclass(frozen=True)
class SchedulingPolicy:
    business_hours: TimeRange = TimeRange(8 * 60, 20 * 60)
    max_days_ahead: int = 30
    allowed_durations: frozenset[int] = field(default_factory=lambda: frozenset({60, 120}))


@dataclass(frozen=True)
class PublicBookedSlot:
    date: date
    start_time: str
    end_time: str
    duration: int
    status: BookingStatus


class SchedulingEngine:
    def __init__(
        self,
        availability: AvailabilityStorePort,
        bookings: BookingStorePort,
        doctors: DoctorDirectoryPort,
        notifier: NotificationDispatcher,
        policy: SchedulingPolicy | None = None,
        today: Callable[[], date] = date.today,
        locks: ScopeLocks | None = None,
    ) -> None:
        self._availability = availability
        self._bookings = bookings
        self._doctors = doctors
        self._notifier = notifier
        self._policy = policy or SchedulingPolicy()
        self._today = today
        self._locks = locks or ScopeLocks()
        self._logger = logging.getLogger(__name__)

    @property
    def policy(self) -> SchedulingPolicy:
        return self._policy

    # ---- availability -------------------------------------------------

    def create_availability(self, actor: Actor, day: date, start_time: str, end_time: str) -> AvailabilityWindow:
        if not actor.is_doctor:
            raise ForbiddenError("Only doctors can publish availability")
        doctor_id = actor.id
        try:
            time_range = TimeRange.from_times(start_time, end_time)
            self._check_not_past(day, "Cannot create availability for past dates")
            if day > self._today() + timedelta(days=self._policy.max_days_ahead):
                raise DateTooFarError(
                    f"Date is too far in the future (at most {self._policy.max_days_ahead} days ahead)"
                )
            hours = self._policy.business_hours
            if not hours.contains(time_range):
                raise OutOfBusinessHoursError(
                    f"Availability must be between {hours.start_time} and {hours.end_time}"
                )

            self._locks.prune(self._today())
            with self._locks.hold(doctor_id, day):
                for existing in self._availability.query(doctor_id=doctor_id, day=day):
                    if existing.range.overlaps(time_range):
                        raise OverlapError(
                            f"Availability conflicts with existing availability {existing.range}"
                        )
                window = self._availability.add(
                    AvailabilityWindow(
                        id=_new_id(),
                        doctor_id=doctor_id,
                        date=day,
                        range=time_range,
                        created_at=datetime.now(),
                    )
                )
        except SchedulingError as e:
            self._log_rejected("Availability rejected", e, doctor_id=doctor_id, day=day)
            raise

        self._logger.info(
            "Availability created",
            extra={"doctor_id": doctor_id, "window_id": window.id, "date": day.isoformat(), "range": str(time_range)},
        )
        return window

    def list_availability(self, doctor_id: str | None = None, day: date | None = None) -> list[AvailabilityWindow]:
        return self._availability.query(doctor_id=doctor_id, day=day)

    def list_my_availability(self, actor: Actor, day: date | None = None) -> list[AvailabilityWindow]:
        if not actor.is_doctor:
            raise ForbiddenError("Only doctors have availability")
        return self._availability.query(doctor_id=actor.id, day=day)

    def remove_availability(self, actor: Actor, window_id: str) -> None:
        window = self._availability.get(window_id)
        if window is None:
            raise NotFoundError("Availability not found")
        if window.doctor_id != actor.id:
            raise ForbiddenError("You can only remove your own availability")
        # existing bookings keep their slot: coverage is checked at creation time only
        with self._locks.hold(window.doctor_id, window.date):
            self._availability.remove(window_id)
        self._logger.info(
            "Availability removed",
            extra={"doctor_id": window.doctor_id, "window_id": window_id, "date": window.date.isoformat()},
        )

    # ---- bookings -----------------------------------------------------

    def create_booking(
        self,
        actor: Actor,
        doctor_id: str,
        patient_id: str,
        day: date,
        start_time: str,
        duration: int | None = None,
        end_time: str | None = None,
        reason: str | None = None,
    ) -> Booking:
        """
        Validate and create a PENDING booking.

        Checks run in a fixed order so the first applicable error is the one
        reported: time format, past date, duration, doctor, duplicate, availability,
        coverage, conflict. Either ``duration`` or ``end_time`` must be given.
        """
        if not actor.is_patient:
            raise ForbiddenError("Only patients can create bookings")
        if actor.id != patient_id:
            raise ForbiddenError("Patients can only book for themselves")

        try:
            start, end = self._resolve_booking_minutes(start_time, duration, end_time)
            self._check_not_past(day, "Cannot create bookings for past dates")
            if end - start not in self._policy.allowed_durations:
                allowed = " or ".join(str(d) for d in sorted(self._policy.allowed_durations))
                raise InvalidDurationError(f"Duration must be {allowed} minutes")

            doctor = self._doctors.get_doctor(doctor_id)
            if doctor is None or not doctor.is_bookable:
                raise DoctorUnavailableError()

            self._locks.prune(self._today())
            with self._locks.hold(doctor_id, day):
                if self._bookings.find_by_doctor_patient_date(doctor_id, patient_id, day):
                    raise DuplicateBookingError()

                windows = self._availability.query(doctor_id=doctor_id, day=day)
                if not windows:
                    raise NoAvailabilityError()
                # an end past midnight can never fall inside a window
                if end >= MINUTES_PER_DAY:
                    raise OutsideAvailabilityError()
                time_range = TimeRange(start, end)
                if not any(w.range.contains(time_range) for w in windows):
                    raise OutsideAvailabilityError()

                if self._bookings.find_overlapping(doctor_id, day, time_range):
                    raise SlotConflictError()

                now = datetime.now()
                booking = self._bookings.add(
                    Booking(
                        id=_new_id(),
                        doctor_id=doctor_id,
                        patient_id=patient_id,
                        date=day,
                        range=time_range,
                        status=BookingStatus.PENDING,
                        reason=reason,
                        created_at=now,
                        updated_at=now,
                    )
                )
        except SchedulingError as e:
            self._log_rejected("Booking rejected", e, doctor_id=doctor_id, day=day, patient_id=patient_id)
            raise

        self._logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "doctor_id": doctor_id,
                "patient_id": patient_id,
                "date": day.isoformat(),
                "range": str(time_range),
            },
        )
        self._notifier.dispatch(
            Notification(
                user_id=booking.doctor_id,
                type=BOOKING_STATUS_NOTIFICATION,
                title="New Booking Request",
                message=f"New request on {booking.date.isoformat()} at {booking.start_time}",
                related_booking_id=booking.id,
            )
        )
        self._notifier.dispatch(
            Notification(
                user_id=booking.patient_id,
                type=BOOKING_STATUS_NOTIFICATION,
                title="Booking Requested",
                message=f"Your booking on {booking.date.isoformat()} at {booking.start_time} is awaiting confirmation.",
                related_booking_id=booking.id,
            )
        )
        return booking

    def accept_booking(self, actor: Actor, booking_id: str) -> Booking:
        booking = self._transition(actor, booking_id, BookingStatus.ACCEPTED)
        self._notifier.dispatch(
            Notification(
                user_id=booking.patient_id,
                type=BOOKING_STATUS_NOTIFICATION,
                title="Booking Accepted",
                message=f"Your booking on {booking.date.isoformat()} at {booking.start_time} was accepted.",
                related_booking_id=booking.id,
            )
        )
        return booking

    def reject_booking(self, actor: Actor, booking_id: str) -> Booking:
        booking = self._transition(actor, booking_id, BookingStatus.REJECTED)
        self._notifier.dispatch(
            Notification(
                user_id=booking.patient_id,
                type=BOOKING_STATUS_NOTIFICATION,
                title="Booking Rejected",
                message=f"Your booking on {booking.date.isoformat()} at {booking.start_time} was rejected.",
                related_booking_id=booking.id,
            )
        )
        return booking

    def cancel_booking(self, actor: Actor, booking_id: str) -> Booking:
        booking = self._transition(actor, booking_id, BookingStatus.CANCELLED)
        cancelled_by_patient = actor.id == booking.patient_id
        self._notifier.dispatch(
            Notification(
                user_id=booking.doctor_id if cancelled_by_patient else booking.patient_id,
                type=BOOKING_STATUS_NOTIFICATION,
                title="Booking Cancelled",
                message=(
                    f"Booking on {booking.date.isoformat()} at {booking.start_time} was cancelled "
                    f"by the {'patient' if cancelled_by_patient else 'doctor'}."
                ),
                related_booking_id=booking.id,
            )
        )
        return booking

    def get_booking(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    def list_bookings_for_doctor(self, doctor_id: str) -> list[Booking]:
        return _newest_first(self._bookings.list_for_doctor(doctor_id))

    def list_bookings_for_patient(self, patient_id: str) -> list[Booking]:
        return _newest_first(self._bookings.list_for_patient(patient_id))

    def get_doctor_schedule(self, actor: Actor, doctor_id: str, day: date | None = None) -> list[Booking]:
        if not actor.is_doctor:
            raise ForbiddenError("Only doctors can view schedules")
        if actor.id != doctor_id:
            raise ForbiddenError("You can only view your own schedule")
        bookings = self._bookings.list_for_doctor(doctor_id, day=day)
        return sorted(bookings, key=lambda b: (b.date, b.range.start_minute))

    def get_public_booked_slots(self, doctor_id: str, day: date | None = None) -> list[PublicBookedSlot]:
        slots = [
            PublicBookedSlot(
                date=b.date,
                start_time=b.start_time,
                end_time=b.end_time,
                duration=b.duration,
                status=b.status,
            )
            for b in self._bookings.list_for_doctor(doctor_id, day=day)
            if b.status != BookingStatus.CANCELLED
        ]
        return sorted(slots, key=lambda s: (s.date, s.start_time))

    # ---- helpers ------------------------------------------------------

    def _transition(self, actor: Actor, booking_id: str, new_status: BookingStatus) -> Booking:
        current = self._bookings.get(booking_id)
        if current is None:
            raise NotFoundError("Booking not found")
        try:
            with self._locks.hold(current.doctor_id, current.date):
                updated = self._bookings.transition(booking_id, new_status, actor)
        except SchedulingError as e:
            self._log_rejected(
                "Booking transition rejected", e, doctor_id=current.doctor_id, day=current.date, booking_id=booking_id
            )
            raise
        self._logger.info(
            "Booking status changed",
            extra={"booking_id": booking_id, "status": updated.status.value, "actor_id": actor.id},
        )
        return updated

    def _resolve_booking_minutes(
        self, start_time: str, duration: int | None, end_time: str | None
    ) -> tuple[int, int]:
        """Start and end minute; the end may fall past midnight and is range-checked later."""
        if duration is None and end_time is None:
            raise InvalidDurationError("Either duration or end time is required")
        start = parse_time(start_time)
        if end_time is None:
            return start, start + duration
        end = parse_time(end_time)
        if start >= end:
            raise InvalidRangeError("Start time must be before end time")
        if duration is not None and duration != end - start:
            raise InvalidRangeError("Duration does not match start and end time")
        return start, end

    def _check_not_past(self, day: date, message: str) -> None:
        if day < self._today():
            raise PastDateError(message)

    def _log_rejected(self, event: str, error: SchedulingError, day: date, **context: str) -> None:
        self._logger.info(
            event,
            extra={**context, "date": day.isoformat(), "reason": error.code, "error": error.message},
        )


def _new_id() -> str:
    return uuid.uuid4().hex


def _newest_first(bookings: list[Booking]) -> list[Booking]:
    return sorted(bookings, key=lambda b: (b.date, b.range.start_minute), reverse=True)
