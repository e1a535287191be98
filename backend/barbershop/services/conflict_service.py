"""
Conflict detection for barber schedules.

A candidate booking conflicts with an existing one when both belong to the
same barber, the existing one is not cancelled, and their half-open
intervals overlap. Back-to-back bookings are allowed.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterator, Optional

from barbershop.domain.entities import Appointment
from barbershop.domain.interfaces import IAppointmentReader
from barbershop.domain.intervals import TimeInterval

logger = logging.getLogger(__name__)


class ConflictDetector:
    """Answers "is this barber free for this interval?" against stored data."""

    def __init__(self, appointment_repo: IAppointmentReader):
        self.appointment_repo = appointment_repo

    def find_conflict(
        self,
        barber_id: str,
        start: datetime,
        duration_minutes: int,
        exclude_id: Optional[str] = None,
    ) -> Optional[Appointment]:
        """Return the first non-cancelled appointment overlapping the candidate."""
        candidate = TimeInterval.from_duration(start, duration_minutes)

        # The window query only narrows the scan; the overlap test below decides.
        existing = self.appointment_repo.find_by_barber_and_window(
            barber_id, candidate.start, candidate.end
        )
        for appointment in existing:
            if appointment.is_cancelled:
                continue
            if exclude_id and appointment.id == exclude_id:
                continue
            if appointment.barber_id != barber_id:
                continue
            if candidate.overlaps(appointment.interval):
                logger.debug(
                    "Conflict found",
                    extra={
                        "context": {
                            "barber_id": barber_id,
                            "candidate": str(candidate),
                            "conflicting_id": appointment.id,
                        }
                    },
                )
                return appointment
        return None

    def has_conflict(
        self,
        barber_id: str,
        start: datetime,
        duration_minutes: int,
        exclude_id: Optional[str] = None,
    ) -> bool:
        return (
            self.find_conflict(barber_id, start, duration_minutes, exclude_id)
            is not None
        )


class BarberLockRegistry:
    """One re-entrant lock per barber, shared by every request in the process.

    Writers hold the lock of each barber they touch across the conflict check
    and the write, which serializes check-then-act per barber. Locks are
    always taken in sorted order so two writers touching the same pair of
    barbers cannot deadlock.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, barber_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(barber_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[barber_id] = lock
            return lock

    @contextmanager
    def hold(self, *barber_ids: str) -> Iterator[None]:
        locks = [self._lock_for(barber_id) for barber_id in sorted(set(barber_ids))]
        acquired = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()


# Process-wide registry used by default
barber_locks = BarberLockRegistry()
