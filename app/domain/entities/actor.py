from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    DOCTOR = "DOCTOR"
    PATIENT = "PATIENT"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class Actor:
    id: str
    role: Role

    @property
    def is_doctor(self) -> bool:
        return self.role == Role.DOCTOR

    @property
    def is_patient(self) -> bool:
        return self.role == Role.PATIENT
