from __future__ import annotations

import json
import logging
from pathlib import Path

from app.application.ports.doctor_directory import DoctorDirectoryPort
from app.domain.entities.actor import Role
from app.domain.entities.doctor import DoctorProfile


class MemoryDoctorDirectory(DoctorDirectoryPort):
    def __init__(self, doctors: dict[str, DoctorProfile] | None = None) -> None:
        self._doctors = dict(doctors or {})

    def get_doctor(self, doctor_id: str) -> DoctorProfile | None:
        return self._doctors.get(doctor_id)

    def register(self, profile: DoctorProfile) -> None:
        self._doctors[profile.id] = profile


def load_doctor_directory(path: str | None) -> MemoryDoctorDirectory:
    """
    Build a directory from a JSON file of user records:
    [{"id": "...", "role": "DOCTOR", "is_active": true, "is_verified": true, "name": "..."}]
    A missing path yields an empty directory.
    """
    logger = logging.getLogger(__name__)
    directory = MemoryDoctorDirectory()
    if not path:
        return directory

    file_path = Path(path)
    if not file_path.exists():
        logger.warning("Doctors file not found, directory is empty", extra={"error": str(file_path)})
        return directory

    with open(file_path, "r", encoding="utf-8") as f:
        records = json.load(f)
    for record in records:
        directory.register(
            DoctorProfile(
                id=str(record["id"]),
                role=Role(str(record.get("role", Role.DOCTOR.value)).upper()),
                is_active=bool(record.get("is_active", True)),
                is_verified=bool(record.get("is_verified", False)),
                name=record.get("name"),
            )
        )
    logger.info("Doctor directory loaded: %s records", len(records))
    return directory
