from fastapi import APIRouter, Depends, Query

from app.api.v1.errors import http_error
from app.api.v1.identity import get_actor
from app.api.v1.schemas import BookingSchema, CreateBookingSchema, PublicBookedSlotSchema
from app.application.use_cases.scheduling_engine import SchedulingEngine
from app.domain.entities.actor import Actor
from app.domain.entities.time_range import parse_date
from app.domain.exceptions import SchedulingError
from app.wiring.dependencies import get_scheduling_engine

router = APIRouter(prefix="/bookings")


@router.post("", response_model=BookingSchema, status_code=201)
def create_booking(
    req: CreateBookingSchema,
    actor: Actor = Depends(get_actor),
    engine: SchedulingEngine = Depends(get_scheduling_engine),
):
    try:
        booking = engine.create_booking(
            actor,
            doctor_id=req.doctor_id,
            patient_id=req.patient_id or actor.id,
            day=parse_date(req.date),
            start_time=req.start_time,
            duration=req.duration,
            end_time=req.end_time,
            reason=req.reason,
        )
    except SchedulingError as e:
        raise http_error(e)
    return BookingSchema.from_entity(booking)


@router.post("/{booking_id}/accept", response_model=BookingSchema)
def accept_booking(
    booking_id: str,
    actor: Actor = Depends(get_actor),
    engine: SchedulingEngine = Depends(get_scheduling_engine),
):
    try:
        return BookingSchema.from_entity(engine.accept_booking(actor, booking_id))
    except SchedulingError as e:
        raise http_error(e)


@router.post("/{booking_id}/reject", response_model=BookingSchema)
def reject_booking(
    booking_id: str,
    actor: Actor = Depends(get_actor),
    engine: SchedulingEngine = Depends(get_scheduling_engine),
):
    try:
        return BookingSchema.from_entity(engine.reject_booking(actor, booking_id))
    except SchedulingError as e:
        raise http_error(e)


@router.post("/{booking_id}/cancel", response_model=BookingSchema)
def cancel_booking(
    booking_id: str,
    actor: Actor = Depends(get_actor),
    engine: SchedulingEngine = Depends(get_scheduling_engine),
):
    try:
        return BookingSchema.from_entity(engine.cancel_booking(actor, booking_id))
    except SchedulingError as e:
        raise http_error(e)


@router.get("/doctor/{doctor_id}", response_model=list[BookingSchema])
def list_bookings_for_doctor(
    doctor_id: str,
    engine: SchedulingEngine = Depends(get_scheduling_engine),
):
    return [BookingSchema.from_entity(b) for b in engine.list_bookings_for_doctor(doctor_id)]


@router.get("/patient/{patient_id}", response_model=list[BookingSchema])
def list_bookings_for_patient(
    patient_id: str,
    engine: SchedulingEngine = Depends(get_scheduling_engine),
):
    return [BookingSchema.from_entity(b) for b in engine.list_bookings_for_patient(patient_id)]


@router.get("/schedule/{doctor_id}", response_model=list[BookingSchema])
def get_doctor_schedule(
    doctor_id: str,
    date: str | None = Query(None, description="YYYY-MM-DD"),
    actor: Actor = Depends(get_actor),
    engine: SchedulingEngine = Depends(get_scheduling_engine),
):
    try:
        day = parse_date(date) if date else None
        bookings = engine.get_doctor_schedule(actor, doctor_id, day=day)
    except SchedulingError as e:
        raise http_error(e)
    return [BookingSchema.from_entity(b) for b in bookings]


@router.get("/public/{doctor_id}", response_model=list[PublicBookedSlotSchema])
def get_public_booked_slots(
    doctor_id: str,
    date: str | None = Query(None, description="YYYY-MM-DD"),
    engine: SchedulingEngine = Depends(get_scheduling_engine),
):
    try:
        day = parse_date(date) if date else None
    except SchedulingError as e:
        raise http_error(e)
    return [PublicBookedSlotSchema.from_entity(s) for s in engine.get_public_booked_slots(doctor_id, day=day)]
