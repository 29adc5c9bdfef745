from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from app.domain.entities.availability_window import AvailabilityWindow


class AvailabilityStorePort(ABC):
    @abstractmethod
    def add(self, window: AvailabilityWindow) -> AvailabilityWindow:
        """Persist an already validated window."""
        raise NotImplementedError

    @abstractmethod
    def get(self, window_id: str) -> AvailabilityWindow | None:
        raise NotImplementedError

    @abstractmethod
    def query(
        self,
        doctor_id: str | None = None,
        day: date | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[AvailabilityWindow]:
        """Return matching windows sorted by (date, start minute)."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, window_id: str) -> AvailabilityWindow:
        """Delete a window unconditionally. Raises NotFoundError if absent."""
        raise NotImplementedError
