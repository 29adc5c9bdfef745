from __future__ import annotations

import logging
from datetime import date, timedelta

from app.application.ports.availability_store import AvailabilityStorePort
from app.application.ports.booking_store import BookingStorePort
from app.domain.entities.actor import Actor
from app.domain.entities.availability_window import AvailabilityWindow
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.slot_view import SlotStatus, SlotView
from app.domain.entities.time_range import TimeRange
from app.domain.exceptions import InvalidRangeError


class CalendarProjector:
    """
    Read-side merge of availability windows and bookings into per-day slots.

    Both stores are read on every call; nothing is cached.
    """

    def __init__(
        self,
        availability: AvailabilityStorePort,
        bookings: BookingStorePort,
        business_hours: TimeRange = TimeRange(8 * 60, 20 * 60),
        slot_minutes: int = 60,
    ) -> None:
        self._availability = availability
        self._bookings = bookings
        self._business_hours = business_hours
        self._slot_minutes = slot_minutes
        self._logger = logging.getLogger(__name__)

    def project(
        self,
        doctor_id: str,
        date_from: date,
        date_to: date,
        viewer: Actor | None = None,
        slot_minutes: int | None = None,
    ) -> dict[date, list[SlotView]]:
        """
        Build the calendar for ``doctor_id`` between two dates (inclusive).

        Only dates with at least one availability window appear. Pass
        ``slot_minutes`` (e.g. a booking duration) for duration-sized slots.
        """
        if date_from > date_to:
            raise InvalidRangeError('"from" date must be before "to" date')
        step = slot_minutes or self._slot_minutes
        if step <= 0:
            raise InvalidRangeError("Slot length must be positive")

        windows = self._availability.query(doctor_id=doctor_id, date_from=date_from, date_to=date_to)
        bookings = self._bookings.list_for_scope(doctor_id, date_from, date_to)

        windows_by_day: dict[date, list[AvailabilityWindow]] = {}
        for window in windows:
            windows_by_day.setdefault(window.date, []).append(window)
        bookings_by_day: dict[date, list[Booking]] = {}
        for booking in bookings:
            bookings_by_day.setdefault(booking.date, []).append(booking)

        calendar: dict[date, list[SlotView]] = {}
        day = date_from
        while day <= date_to:
            if day in windows_by_day:
                calendar[day] = self._project_day(
                    windows_by_day[day], bookings_by_day.get(day, []), viewer, step
                )
            day += timedelta(days=1)

        self._logger.debug(
            "Calendar projected",
            extra={"doctor_id": doctor_id, "date": f"{date_from.isoformat()}..{date_to.isoformat()}"},
        )
        return calendar

    def _project_day(
        self,
        windows: list[AvailabilityWindow],
        bookings: list[Booking],
        viewer: Actor | None,
        step: int,
    ) -> list[SlotView]:
        slots: list[SlotView] = []
        start = self._business_hours.start_minute
        while start + step <= self._business_hours.end_minute:
            candidate = TimeRange(start, start + step)
            slots.append(self._classify(candidate, windows, bookings, viewer))
            start += step
        return slots

    def _classify(
        self,
        candidate: TimeRange,
        windows: list[AvailabilityWindow],
        bookings: list[Booking],
        viewer: Actor | None,
    ) -> SlotView:
        overlapping = [b for b in bookings if b.range.overlaps(candidate)]

        # the viewer's own booking wins over a generic reservation
        if viewer is not None:
            for booking in overlapping:
                if booking.is_participant(viewer.id) and booking.status in _MINE_STATUS:
                    return SlotView(
                        start_time=candidate.start_time,
                        end_time=candidate.end_time,
                        status=_MINE_STATUS[booking.status],
                        booking_id=booking.id,
                    )

        if overlapping:
            status = SlotStatus.RESERVED
        elif any(w.range.contains(candidate) for w in windows):
            status = SlotStatus.AVAILABLE
        else:
            status = SlotStatus.UNAVAILABLE
        return SlotView(start_time=candidate.start_time, end_time=candidate.end_time, status=status)


_MINE_STATUS = {
    BookingStatus.PENDING: SlotStatus.MINE_PENDING,
    BookingStatus.ACCEPTED: SlotStatus.MINE_ACCEPTED,
}
