from fastapi import APIRouter, Depends, Query, Response

from app.api.v1.errors import http_error
from app.api.v1.identity import get_actor, get_optional_actor
from app.api.v1.schemas import AvailabilitySchema, CreateAvailabilitySchema, SlotViewSchema
from app.application.use_cases.calendar_projector import CalendarProjector
from app.application.use_cases.scheduling_engine import SchedulingEngine
from app.domain.entities.actor import Actor
from app.domain.entities.time_range import parse_date
from app.domain.exceptions import SchedulingError
from app.wiring.dependencies import get_calendar_projector, get_scheduling_engine

router = APIRouter(prefix="/availability")


@router.post("", response_model=AvailabilitySchema, status_code=201)
def create_availability(
    req: CreateAvailabilitySchema,
    actor: Actor = Depends(get_actor),
    engine: SchedulingEngine = Depends(get_scheduling_engine),
):
    try:
        window = engine.create_availability(actor, parse_date(req.date), req.start_time, req.end_time)
    except SchedulingError as e:
        raise http_error(e)
    return AvailabilitySchema.from_entity(window)


@router.get("", response_model=list[AvailabilitySchema])
def list_availability(
    doctor_id: str | None = Query(None),
    date: str | None = Query(None, description="YYYY-MM-DD"),
    engine: SchedulingEngine = Depends(get_scheduling_engine),
):
    try:
        day = parse_date(date) if date else None
    except SchedulingError as e:
        raise http_error(e)
    return [AvailabilitySchema.from_entity(w) for w in engine.list_availability(doctor_id=doctor_id, day=day)]


@router.get("/me", response_model=list[AvailabilitySchema])
def list_my_availability(
    date: str | None = Query(None, description="YYYY-MM-DD"),
    actor: Actor = Depends(get_actor),
    engine: SchedulingEngine = Depends(get_scheduling_engine),
):
    try:
        day = parse_date(date) if date else None
        windows = engine.list_my_availability(actor, day=day)
    except SchedulingError as e:
        raise http_error(e)
    return [AvailabilitySchema.from_entity(w) for w in windows]


@router.get("/calendar", response_model=dict[str, list[SlotViewSchema]])
def get_calendar(
    doctor_id: str = Query(...),
    date_from: str = Query(..., alias="from", description="YYYY-MM-DD"),
    date_to: str = Query(..., alias="to", description="YYYY-MM-DD"),
    slot_minutes: int | None = Query(None, gt=0),
    viewer: Actor | None = Depends(get_optional_actor),
    projector: CalendarProjector = Depends(get_calendar_projector),
):
    try:
        calendar = projector.project(
            doctor_id,
            parse_date(date_from),
            parse_date(date_to),
            viewer=viewer,
            slot_minutes=slot_minutes,
        )
    except SchedulingError as e:
        raise http_error(e)
    return {
        day.isoformat(): [SlotViewSchema.from_entity(s) for s in slots]
        for day, slots in calendar.items()
    }


@router.delete("/{window_id}", status_code=204)
def remove_availability(
    window_id: str,
    actor: Actor = Depends(get_actor),
    engine: SchedulingEngine = Depends(get_scheduling_engine),
) -> Response:
    try:
        engine.remove_availability(actor, window_id)
    except SchedulingError as e:
        raise http_error(e)
    return Response(status_code=204)
