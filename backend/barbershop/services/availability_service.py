"""
Free-slot generation for a barber's working day.

Candidate starts are laid out every ``slot_step_minutes`` from opening time
up to (not including) closing time. A candidate ``[t, t + duration)`` is
offered when it overlaps none of the barber's non-cancelled appointments.
By default a slot may start before closing and run past it; set
``CLIP_SLOTS_AT_CLOSING`` to drop those.
"""

import logging
import time
from datetime import date, datetime, timedelta
from typing import Iterator, List, Optional, Sequence

from barbershop.core.config import SchedulingConfig, get_scheduling_config
from barbershop.core.logging_config import log_performance
from barbershop.domain.entities import Slot
from barbershop.domain.interfaces import IAppointmentReader
from barbershop.domain.intervals import TimeInterval

logger = logging.getLogger(__name__)


class SlotSequence:
    """Free slots of one barber-day over a fixed list of busy intervals.

    Each iteration walks the day again from opening time without touching
    storage, so the sequence can be consumed any number of times.
    """

    def __init__(
        self,
        hours: TimeInterval,
        busy: Sequence[TimeInterval],
        service_duration: int,
        config: SchedulingConfig,
    ):
        self.hours = hours
        self.busy = list(busy)
        self.service_duration = service_duration
        self.config = config

    def __iter__(self) -> Iterator[Slot]:
        step = timedelta(minutes=self.config.slot_step_minutes)
        current = self.hours.start
        while current < self.hours.end:
            candidate = TimeInterval.from_duration(current, self.service_duration)
            if self.config.clip_slots_at_closing and candidate.end > self.hours.end:
                break

            free = True
            for interval in self.busy:
                if interval.start >= candidate.end:
                    break
                if candidate.overlaps(interval):
                    free = False
                    break

            if free:
                yield Slot(start=candidate.start, end=candidate.end, available=True)
            current += step


class AvailabilityService:
    def __init__(
        self,
        appointment_repo: IAppointmentReader,
        config: Optional[SchedulingConfig] = None,
    ):
        self.appointment_repo = appointment_repo
        self.config = config or get_scheduling_config()

    def working_hours(self, day: date) -> TimeInterval:
        midnight = datetime.combine(day, datetime.min.time())
        return TimeInterval(
            midnight + timedelta(hours=self.config.workday_start_hour),
            midnight + timedelta(hours=self.config.workday_end_hour),
        )

    def iter_slots(
        self, barber_id: str, day: date, service_duration: int
    ) -> SlotSequence:
        """Return the free slots as a lazy, re-iterable sequence.

        Busy intervals are read once, when this method is called. Iterating
        the result does no further I/O and always yields the same slots.
        """
        if isinstance(day, datetime):
            day = day.date()
        hours = self.working_hours(day)
        # Validates the duration before any query
        TimeInterval.from_duration(hours.start, service_duration)

        # Widen the window so that slots running past closing are checked too
        appointments = self.appointment_repo.find_by_barber_and_window(
            barber_id, hours.start, hours.end + timedelta(minutes=service_duration)
        )
        busy = sorted(
            (apt.interval for apt in appointments if not apt.is_cancelled),
            key=lambda interval: interval.start,
        )
        return SlotSequence(hours, busy, service_duration, self.config)

    def get_available_slots(
        self, barber_id: str, day: date, service_duration: int
    ) -> List[Slot]:
        started = time.perf_counter()
        slots = list(self.iter_slots(barber_id, day, service_duration))
        log_performance(
            "get_available_slots",
            (time.perf_counter() - started) * 1000,
            barber_id=barber_id,
            day=str(day),
            slot_count=len(slots),
        )
        return slots
