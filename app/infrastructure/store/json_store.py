from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, TypeVar

from app.domain.entities.availability_window import AvailabilityWindow
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.time_range import TimeRange
from app.domain.exceptions import SchedulingError
from app.infrastructure.store.memory_store import MemoryAvailabilityStore, MemoryBookingStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _load_records(file_path: Path) -> list[dict[str, Any]]:
    """Load records from a JSON file, return [] if missing or corrupted."""
    if not file_path.exists():
        return []
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return list(data.get("records", []))
    except (json.JSONDecodeError, IOError, AttributeError) as e:
        logger.error("Store file unreadable, starting empty", extra={"error": f"{file_path}: {e}"})
        return []


def _decode_records(file_path: Path, decode: Callable[[dict[str, Any]], T]) -> list[T]:
    """Decode each stored record, skipping and logging the ones that are malformed."""
    decoded: list[T] = []
    for index, record in enumerate(_load_records(file_path)):
        try:
            decoded.append(decode(record))
        except (KeyError, TypeError, ValueError, AttributeError, SchedulingError) as e:
            logger.warning(
                "Skipping malformed store record",
                extra={"error": f"{file_path.name}[{index}]: {type(e).__name__}: {e}"},
            )
    return decoded


def _save_records(file_path: Path, records: list[dict[str, Any]]) -> None:
    """Save records to JSON file atomically."""
    temp_path = file_path.with_suffix(".json.tmp")
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump({"version": 1, "records": records}, f, indent=2, ensure_ascii=False)
        temp_path.replace(file_path)
    except Exception:
        if temp_path.exists():
            temp_path.unlink(missing_ok=True)
        raise


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _from_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None


class JsonAvailabilityStore(MemoryAvailabilityStore):
    def __init__(self, data_dir: str = "./data") -> None:
        super().__init__()
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._data_dir / "availability.json"
        for window in _decode_records(self._file_path, self._deserialize):
            self._windows[window.id] = window

    def _persist(self) -> None:
        _save_records(self._file_path, [self._serialize(w) for w in self._windows.values()])

    def _serialize(self, window: AvailabilityWindow) -> dict[str, Any]:
        return {
            "id": window.id,
            "doctor_id": window.doctor_id,
            "date": window.date.isoformat(),
            "start_time": window.start_time,
            "end_time": window.end_time,
            "created_at": _iso(window.created_at),
        }

    def _deserialize(self, data: dict[str, Any]) -> AvailabilityWindow:
        return AvailabilityWindow(
            id=data["id"],
            doctor_id=data["doctor_id"],
            date=date.fromisoformat(data["date"]),
            range=TimeRange.from_times(data["start_time"], data["end_time"]),
            created_at=_from_iso(data.get("created_at")),
        )


class JsonBookingStore(MemoryBookingStore):
    def __init__(self, data_dir: str = "./data") -> None:
        super().__init__()
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._data_dir / "bookings.json"
        for booking in _decode_records(self._file_path, self._deserialize):
            self._bookings[booking.id] = booking

    def _persist(self) -> None:
        _save_records(self._file_path, [self._serialize(b) for b in self._bookings.values()])

    def _serialize(self, booking: Booking) -> dict[str, Any]:
        return {
            "id": booking.id,
            "doctor_id": booking.doctor_id,
            "patient_id": booking.patient_id,
            "date": booking.date.isoformat(),
            "start_time": booking.start_time,
            "end_time": booking.end_time,
            "duration": booking.duration,
            "status": booking.status.value,
            "reason": booking.reason,
            "created_at": _iso(booking.created_at),
            "updated_at": _iso(booking.updated_at),
        }

    def _deserialize(self, data: dict[str, Any]) -> Booking:
        return Booking(
            id=data["id"],
            doctor_id=data["doctor_id"],
            patient_id=data["patient_id"],
            date=date.fromisoformat(data["date"]),
            range=TimeRange.from_times(data["start_time"], data["end_time"]),
            status=BookingStatus(data.get("status", BookingStatus.PENDING.value)),
            reason=data.get("reason"),
            created_at=_from_iso(data.get("created_at")),
            updated_at=_from_iso(data.get("updated_at")),
        )
