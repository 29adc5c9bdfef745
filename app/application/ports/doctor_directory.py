from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.doctor import DoctorProfile


class DoctorDirectoryPort(ABC):
    @abstractmethod
    def get_doctor(self, doctor_id: str) -> DoctorProfile | None:
        """Look up a user record by id. Returns None if unknown."""
        raise NotImplementedError
