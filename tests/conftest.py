"""Shared test fixtures for the scheduling tests."""

from __future__ import annotations

from datetime import date

import pytest

from app.application.ports.notification_sink import NotificationSinkPort
from app.application.use_cases.calendar_projector import CalendarProjector
from app.application.use_cases.dispatch_notification import NotificationDispatcher
from app.application.use_cases.scheduling_engine import SchedulingEngine
from app.domain.entities.actor import Actor, Role
from app.domain.entities.doctor import DoctorProfile
from app.domain.entities.notification import Notification
from app.infrastructure.directory.doctor_directory import MemoryDoctorDirectory
from app.infrastructure.store.memory_store import MemoryAvailabilityStore, MemoryBookingStore

TODAY = date(2025, 6, 1)


class RecordingSink(NotificationSinkPort):
    def __init__(self) -> None:
        self.sent: list[Notification] = []

    def send(self, notification: Notification) -> None:
        self.sent.append(notification)


@pytest.fixture
def doctor() -> Actor:
    return Actor(id="doc-1", role=Role.DOCTOR)


@pytest.fixture
def other_doctor() -> Actor:
    return Actor(id="doc-2", role=Role.DOCTOR)


@pytest.fixture
def directory() -> MemoryDoctorDirectory:
    return MemoryDoctorDirectory(
        {
            "doc-1": DoctorProfile(id="doc-1", name="Dr. One"),
            "doc-2": DoctorProfile(id="doc-2", name="Dr. Two"),
            "doc-inactive": DoctorProfile(id="doc-inactive", is_active=False),
            "doc-unverified": DoctorProfile(id="doc-unverified", is_verified=False),
            "pat-as-doc": DoctorProfile(id="pat-as-doc", role=Role.PATIENT),
        }
    )


@pytest.fixture
def availability_store() -> MemoryAvailabilityStore:
    return MemoryAvailabilityStore()


@pytest.fixture
def booking_store() -> MemoryBookingStore:
    return MemoryBookingStore()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def engine(availability_store, booking_store, directory, sink) -> SchedulingEngine:
    return SchedulingEngine(
        availability=availability_store,
        bookings=booking_store,
        doctors=directory,
        notifier=NotificationDispatcher(sink=sink),
        today=lambda: TODAY,
    )


@pytest.fixture
def projector(availability_store, booking_store) -> CalendarProjector:
    return CalendarProjector(availability=availability_store, bookings=booking_store)
