from __future__ import annotations

from dataclasses import dataclass

from app.domain.entities.actor import Role


@dataclass(frozen=True)
class DoctorProfile:
    id: str
    role: Role = Role.DOCTOR
    is_active: bool = True
    is_verified: bool = True
    name: str | None = None

    @property
    def is_bookable(self) -> bool:
        return self.role == Role.DOCTOR and self.is_active and self.is_verified
