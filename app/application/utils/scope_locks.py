from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date


class ScopeLocks:
    """Per-(doctor, date) locks serializing check-then-write sequences."""

    def __init__(self) -> None:
        self._locks: dict[tuple[str, date], threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict

    def _get_lock(self, doctor_id: str, day: date) -> threading.Lock:
        """Get or create a lock for a (doctor_id, date) scope."""
        key = (doctor_id, day)
        with self._lock_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    @contextmanager
    def hold(self, doctor_id: str, day: date) -> Iterator[None]:
        with self._get_lock(doctor_id, day):
            yield

    def prune(self, before: date) -> int:
        """Drop idle locks for dates earlier than ``before``; returns how many were dropped."""
        with self._lock_lock:
            stale = [key for key, lock in self._locks.items() if key[1] < before and not lock.locked()]
            for key in stale:
                del self._locks[key]
        return len(stale)

    def __len__(self) -> int:
        with self._lock_lock:
            return len(self._locks)
