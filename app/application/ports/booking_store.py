from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Collection
from datetime import date

from app.domain.entities.actor import Actor
from app.domain.entities.booking import NON_BLOCKING_STATUSES, Booking, BookingStatus
from app.domain.entities.time_range import TimeRange


class BookingStorePort(ABC):
    @abstractmethod
    def add(self, booking: Booking) -> Booking:
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def find_overlapping(
        self,
        doctor_id: str,
        day: date,
        time_range: TimeRange,
        exclude_status: Collection[BookingStatus] = NON_BLOCKING_STATUSES,
    ) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_by_doctor_patient_date(
        self,
        doctor_id: str,
        patient_id: str,
        day: date,
        exclude_status: Collection[BookingStatus] = NON_BLOCKING_STATUSES,
    ) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def list_for_doctor(self, doctor_id: str, day: date | None = None) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def list_for_patient(self, patient_id: str) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def list_for_scope(
        self,
        doctor_id: str,
        date_from: date,
        date_to: date,
        exclude_status: Collection[BookingStatus] = NON_BLOCKING_STATUSES,
    ) -> list[Booking]:
        """Bookings of one doctor between two dates (inclusive), sorted by date and start."""
        raise NotImplementedError

    @abstractmethod
    def transition(self, booking_id: str, new_status: BookingStatus, actor: Actor) -> Booking:
        """
        The only mutation path for booking status.
        Raises NotFoundError, ForbiddenError or InvalidStateTransitionError, in that order.
        """
        raise NotImplementedError
