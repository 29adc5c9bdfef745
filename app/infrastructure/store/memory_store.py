from __future__ import annotations

import threading
from collections.abc import Collection
from datetime import date

from app.application.ports.availability_store import AvailabilityStorePort
from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.actor import Actor
from app.domain.entities.availability_window import AvailabilityWindow
from app.domain.entities.booking import NON_BLOCKING_STATUSES, Booking, BookingStatus
from app.domain.entities.time_range import TimeRange
from app.domain.exceptions import NotFoundError


class MemoryAvailabilityStore(AvailabilityStorePort):
    def __init__(self) -> None:
        self._windows: dict[str, AvailabilityWindow] = {}
        self._lock = threading.RLock()

    def add(self, window: AvailabilityWindow) -> AvailabilityWindow:
        with self._lock:
            previous = self._windows.get(window.id)
            self._windows[window.id] = window
            try:
                self._persist()
            except Exception:
                _restore(self._windows, window.id, previous)
                raise
        return window

    def get(self, window_id: str) -> AvailabilityWindow | None:
        with self._lock:
            return self._windows.get(window_id)

    def query(
        self,
        doctor_id: str | None = None,
        day: date | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[AvailabilityWindow]:
        with self._lock:
            windows = list(self._windows.values())
        matches = [
            w
            for w in windows
            if (doctor_id is None or w.doctor_id == doctor_id)
            and (day is None or w.date == day)
            and (date_from is None or w.date >= date_from)
            and (date_to is None or w.date <= date_to)
        ]
        return sorted(matches, key=AvailabilityWindow.sort_key)

    def remove(self, window_id: str) -> AvailabilityWindow:
        with self._lock:
            window = self._windows.pop(window_id, None)
            if window is None:
                raise NotFoundError("Availability not found")
            try:
                self._persist()
            except Exception:
                self._windows[window_id] = window
                raise
        return window

    def _persist(self) -> None:
        """Hook for durable subclasses; called with the lock held."""


class MemoryBookingStore(BookingStorePort):
    def __init__(self) -> None:
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.RLock()

    def add(self, booking: Booking) -> Booking:
        with self._lock:
            previous = self._bookings.get(booking.id)
            self._bookings[booking.id] = booking
            try:
                self._persist()
            except Exception:
                _restore(self._bookings, booking.id, previous)
                raise
        return booking

    def get(self, booking_id: str) -> Booking | None:
        with self._lock:
            return self._bookings.get(booking_id)

    def find_overlapping(
        self,
        doctor_id: str,
        day: date,
        time_range: TimeRange,
        exclude_status: Collection[BookingStatus] = NON_BLOCKING_STATUSES,
    ) -> list[Booking]:
        return [
            b
            for b in self._snapshot()
            if b.doctor_id == doctor_id
            and b.date == day
            and b.status not in exclude_status
            and b.range.overlaps(time_range)
        ]

    def find_by_doctor_patient_date(
        self,
        doctor_id: str,
        patient_id: str,
        day: date,
        exclude_status: Collection[BookingStatus] = NON_BLOCKING_STATUSES,
    ) -> list[Booking]:
        return [
            b
            for b in self._snapshot()
            if b.doctor_id == doctor_id
            and b.patient_id == patient_id
            and b.date == day
            and b.status not in exclude_status
        ]

    def list_for_doctor(self, doctor_id: str, day: date | None = None) -> list[Booking]:
        return [b for b in self._snapshot() if b.doctor_id == doctor_id and (day is None or b.date == day)]

    def list_for_patient(self, patient_id: str) -> list[Booking]:
        return [b for b in self._snapshot() if b.patient_id == patient_id]

    def list_for_scope(
        self,
        doctor_id: str,
        date_from: date,
        date_to: date,
        exclude_status: Collection[BookingStatus] = NON_BLOCKING_STATUSES,
    ) -> list[Booking]:
        matches = [
            b
            for b in self._snapshot()
            if b.doctor_id == doctor_id and date_from <= b.date <= date_to and b.status not in exclude_status
        ]
        return sorted(matches, key=lambda b: (b.date, b.range.start_minute))

    def transition(self, booking_id: str, new_status: BookingStatus, actor: Actor) -> Booking:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                raise NotFoundError("Booking not found")
            updated = booking.transitioned(new_status, actor)
            self._bookings[booking_id] = updated
            try:
                self._persist()
            except Exception:
                self._bookings[booking_id] = booking
                raise
        return updated

    def _snapshot(self) -> list[Booking]:
        with self._lock:
            return list(self._bookings.values())

    def _persist(self) -> None:
        """Hook for durable subclasses; called with the lock held."""


def _restore(records: dict, key: str, previous) -> None:
    """Put back the entry a failed write replaced, or drop the one it introduced."""
    if previous is None:
        records.pop(key, None)
    else:
        records[key] = previous
