"""
Tests for booking creation: validation order, conflict rules and the
end-to-end booking scenarios for one doctor's day.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from app.domain.entities.actor import Actor, Role
from app.domain.entities.booking import BookingStatus
from app.domain.exceptions import (
    DoctorUnavailableError,
    DuplicateBookingError,
    ForbiddenError,
    InvalidDurationError,
    InvalidRangeError,
    InvalidStateTransitionError,
    InvalidTimeFormatError,
    NoAvailabilityError,
    OutsideAvailabilityError,
    PastDateError,
    SlotConflictError,
)

TODAY = date(2025, 6, 1)
DAY = date(2025, 6, 10)


def patient(patient_id: str) -> Actor:
    return Actor(id=patient_id, role=Role.PATIENT)


def book(engine, patient_id: str, start: str, duration: int = 60, doctor_id: str = "doc-1", day: date = DAY):
    return engine.create_booking(patient(patient_id), doctor_id, patient_id, day, start, duration=duration)


def test_booking_scenarios(engine, doctor, booking_store):
    """Walk through one morning: booking, conflict, acceptance, cancellation and rebooking."""
    engine.create_availability(doctor, DAY, "09:00", "12:00")

    first = book(engine, "pat-1", "09:00")
    assert first.status == BookingStatus.PENDING
    assert (first.start_time, first.end_time) == ("09:00", "10:00")

    with pytest.raises(SlotConflictError):
        book(engine, "pat-2", "09:30")

    third = book(engine, "pat-3", "10:00", duration=120)
    assert (third.start_time, third.end_time) == ("10:00", "12:00")

    accepted = engine.accept_booking(doctor, first.id)
    assert accepted.status == BookingStatus.ACCEPTED
    with pytest.raises(InvalidStateTransitionError):
        engine.reject_booking(doctor, first.id)

    cancelled = engine.cancel_booking(patient("pat-1"), first.id)
    assert cancelled.status == BookingStatus.CANCELLED

    fourth = book(engine, "pat-4", "09:00")
    assert fourth.status == BookingStatus.PENDING

    active = [b for b in booking_store.list_for_doctor("doc-1", DAY) if b.status != BookingStatus.CANCELLED]
    assert len(active) == 2


def test_half_open_boundary(engine, doctor):
    engine.create_availability(doctor, DAY, "10:00", "12:00")
    book(engine, "pat-1", "10:00")
    second = book(engine, "pat-2", "11:00")
    assert second.start_time == "11:00"


def test_repeated_request_never_silently_succeeds(engine, doctor):
    engine.create_availability(doctor, DAY, "09:00", "12:00")
    book(engine, "pat-1", "09:00")

    with pytest.raises(DuplicateBookingError):
        book(engine, "pat-1", "09:00")
    with pytest.raises(SlotConflictError):
        book(engine, "pat-2", "09:00")


def test_duplicate_rule_ignores_cancelled_and_other_days(engine, doctor):
    engine.create_availability(doctor, DAY, "09:00", "12:00")
    engine.create_availability(doctor, DAY + timedelta(days=1), "09:00", "12:00")

    first = book(engine, "pat-1", "09:00")
    with pytest.raises(DuplicateBookingError):
        book(engine, "pat-1", "11:00")

    assert book(engine, "pat-1", "09:00", day=DAY + timedelta(days=1))

    engine.cancel_booking(patient("pat-1"), first.id)
    assert book(engine, "pat-1", "11:00")


def test_rejected_booking_still_blocks_slot(engine, doctor):
    engine.create_availability(doctor, DAY, "09:00", "12:00")
    first = book(engine, "pat-1", "09:00")
    engine.reject_booking(doctor, first.id)

    with pytest.raises(SlotConflictError):
        book(engine, "pat-2", "09:00")

    # the public view shows every slot that still blocks booking
    public = engine.get_public_booked_slots("doc-1", day=DAY)
    assert [(s.start_time, s.status) for s in public] == [("09:00", BookingStatus.REJECTED)]


def test_coverage_rules(engine, doctor):
    with pytest.raises(NoAvailabilityError):
        book(engine, "pat-1", "09:00")

    engine.create_availability(doctor, DAY, "09:00", "10:00")
    engine.create_availability(doctor, DAY, "10:00", "11:00")

    # spanning two adjacent windows is not covered by a single one
    with pytest.raises(OutsideAvailabilityError):
        book(engine, "pat-1", "09:00", duration=120)
    with pytest.raises(OutsideAvailabilityError):
        book(engine, "pat-1", "10:30")


def test_doctor_must_be_bookable(engine):
    for doctor_id in ("unknown", "doc-inactive", "doc-unverified", "pat-as-doc"):
        with pytest.raises(DoctorUnavailableError):
            book(engine, "pat-1", "09:00", doctor_id=doctor_id)


def test_input_validation(engine, doctor):
    engine.create_availability(doctor, DAY, "09:00", "12:00")

    with pytest.raises(InvalidTimeFormatError):
        book(engine, "pat-1", "9:00")
    with pytest.raises(InvalidDurationError):
        book(engine, "pat-1", "09:00", duration=90)
    with pytest.raises(OutsideAvailabilityError):
        book(engine, "pat-1", "23:30", duration=60)
    with pytest.raises(InvalidDurationError):
        engine.create_booking(patient("pat-1"), "doc-1", "pat-1", DAY, "09:00")


def test_end_time_instead_of_duration(engine, doctor):
    engine.create_availability(doctor, DAY, "09:00", "12:00")

    booking = engine.create_booking(patient("pat-1"), "doc-1", "pat-1", DAY, "10:00", end_time="12:00")
    assert booking.duration == 120

    with pytest.raises(InvalidDurationError):
        engine.create_booking(patient("pat-2"), "doc-1", "pat-2", DAY, "09:00", end_time="09:30")
    with pytest.raises(InvalidRangeError):
        engine.create_booking(patient("pat-3"), "doc-1", "pat-3", DAY, "09:00", duration=60, end_time="11:00")


def test_error_order(engine, doctor):
    """The first applicable error wins: past date before duration before doctor before coverage."""
    past = TODAY - timedelta(days=1)

    with pytest.raises(PastDateError):
        book(engine, "pat-1", "09:00", duration=90, doctor_id="unknown", day=past)
    with pytest.raises(InvalidDurationError):
        book(engine, "pat-1", "09:00", duration=90, doctor_id="unknown")
    with pytest.raises(DoctorUnavailableError):
        book(engine, "pat-1", "09:00", doctor_id="unknown")

    engine.create_availability(doctor, DAY, "09:00", "10:00")
    book(engine, "pat-1", "09:00")
    # duplicate is reported before the slot conflict and the coverage failure
    with pytest.raises(DuplicateBookingError):
        book(engine, "pat-1", "15:00")


def test_error_order_for_out_of_day_and_non_positive_durations(engine, doctor):
    """Ends past midnight and non-positive durations go through the same ordered checks."""
    engine.create_availability(doctor, DAY, "09:00", "12:00")
    past = TODAY - timedelta(days=1)

    with pytest.raises(PastDateError):
        book(engine, "pat-1", "23:30", day=past)
    with pytest.raises(InvalidDurationError):
        book(engine, "pat-1", "23:30", duration=90)
    for duration in (0, -60):
        with pytest.raises(InvalidDurationError):
            book(engine, "pat-1", "09:00", duration=duration)
    with pytest.raises(OutsideAvailabilityError):
        book(engine, "pat-1", "23:30", duration=60)
    with pytest.raises(DoctorUnavailableError):
        book(engine, "pat-1", "23:30", doctor_id="unknown")

    # end_time path: an empty or inverted range is still a range error
    with pytest.raises(InvalidRangeError):
        engine.create_booking(patient("pat-1"), "doc-1", "pat-1", DAY, "10:00", end_time="09:00")
    assert engine.list_bookings_for_patient("pat-1") == []


def test_only_the_patient_books_for_themselves(engine, doctor):
    engine.create_availability(doctor, DAY, "09:00", "12:00")

    with pytest.raises(ForbiddenError):
        engine.create_booking(doctor, "doc-1", "pat-1", DAY, "09:00", duration=60)
    with pytest.raises(ForbiddenError):
        engine.create_booking(patient("pat-2"), "doc-1", "pat-1", DAY, "09:00", duration=60)


def test_booking_reason_is_kept(engine, doctor):
    engine.create_availability(doctor, DAY, "09:00", "12:00")
    booking = engine.create_booking(
        patient("pat-1"), "doc-1", "pat-1", DAY, "09:00", duration=60, reason="Follow-up"
    )
    assert engine.get_booking(booking.id).reason == "Follow-up"


def test_no_double_booking_invariant(engine, doctor, booking_store):
    """Many attempts across the day never leave two active bookings overlapping."""
    engine.create_availability(doctor, DAY, "08:00", "20:00")
    for i, start in enumerate(["08:00", "08:30", "09:00", "10:00", "10:30", "11:00", "13:00", "12:00", "14:00"]):
        for duration in (60, 120):
            try:
                book(engine, f"pat-{i}-{duration}", start, duration=duration)
            except (SlotConflictError, DuplicateBookingError):
                pass

    active = [b for b in booking_store.list_for_doctor("doc-1", DAY) if b.status != BookingStatus.CANCELLED]
    assert active
    for a in active:
        for b in active:
            if a.id != b.id:
                assert not a.range.overlaps(b.range)


def test_listings_and_public_slots(engine, doctor, other_doctor):
    engine.create_availability(doctor, DAY, "09:00", "12:00")
    engine.create_availability(doctor, DAY + timedelta(days=1), "09:00", "12:00")
    first = book(engine, "pat-1", "09:00")
    second = book(engine, "pat-1", "10:00", day=DAY + timedelta(days=1))
    third = book(engine, "pat-2", "11:00")
    engine.cancel_booking(patient("pat-2"), third.id)

    assert [b.id for b in engine.list_bookings_for_patient("pat-1")] == [second.id, first.id]
    assert len(engine.list_bookings_for_doctor("doc-1")) == 3

    public = engine.get_public_booked_slots("doc-1", day=DAY)
    assert [(s.start_time, s.end_time, s.duration, s.status) for s in public] == [
        ("09:00", "10:00", 60, BookingStatus.PENDING)
    ]
    assert not hasattr(public[0], "patient_id")

    schedule = engine.get_doctor_schedule(doctor, "doc-1")
    assert [b.id for b in schedule] == [first.id, third.id, second.id]
    with pytest.raises(ForbiddenError):
        engine.get_doctor_schedule(other_doctor, "doc-1")
    with pytest.raises(ForbiddenError):
        engine.get_doctor_schedule(patient("pat-1"), "doc-1")
