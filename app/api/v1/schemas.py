from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

from app.application.use_cases.scheduling_engine import PublicBookedSlot
from app.domain.entities.availability_window import AvailabilityWindow
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.slot_view import SlotStatus, SlotView


class CreateAvailabilitySchema(BaseModel):
    date: str = Field(description="YYYY-MM-DD")
    start_time: str = Field(description="HH:MM")
    end_time: str = Field(description="HH:MM")


class AvailabilitySchema(BaseModel):
    id: str
    doctor_id: str
    date: dt.date
    start_time: str
    end_time: str
    created_at: dt.datetime | None = None

    @staticmethod
    def from_entity(window: AvailabilityWindow) -> "AvailabilitySchema":
        return AvailabilitySchema(
            id=window.id,
            doctor_id=window.doctor_id,
            date=window.date,
            start_time=window.start_time,
            end_time=window.end_time,
            created_at=window.created_at,
        )


class CreateBookingSchema(BaseModel):
    doctor_id: str
    patient_id: str | None = None  # defaults to the authenticated patient
    date: str = Field(description="YYYY-MM-DD")
    start_time: str = Field(description="HH:MM")
    duration: int | None = None
    end_time: str | None = None
    reason: str | None = Field(default=None, max_length=500)


class BookingSchema(BaseModel):
    id: str
    doctor_id: str
    patient_id: str
    date: dt.date
    start_time: str
    end_time: str
    duration: int
    status: BookingStatus
    reason: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @staticmethod
    def from_entity(booking: Booking) -> "BookingSchema":
        return BookingSchema(
            id=booking.id,
            doctor_id=booking.doctor_id,
            patient_id=booking.patient_id,
            date=booking.date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            duration=booking.duration,
            status=booking.status,
            reason=booking.reason,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class PublicBookedSlotSchema(BaseModel):
    date: dt.date
    start_time: str
    end_time: str
    duration: int
    status: BookingStatus

    @staticmethod
    def from_entity(slot: PublicBookedSlot) -> "PublicBookedSlotSchema":
        return PublicBookedSlotSchema(
            date=slot.date,
            start_time=slot.start_time,
            end_time=slot.end_time,
            duration=slot.duration,
            status=slot.status,
        )


class SlotViewSchema(BaseModel):
    start_time: str
    end_time: str
    status: SlotStatus
    booking_id: str | None = None

    @staticmethod
    def from_entity(slot: SlotView) -> "SlotViewSchema":
        return SlotViewSchema(
            start_time=slot.start_time,
            end_time=slot.end_time,
            status=slot.status,
            booking_id=slot.booking_id,
        )
