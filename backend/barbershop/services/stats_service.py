from datetime import date, datetime, time
from typing import Union

from barbershop.core.exceptions import ValidationError
from barbershop.domain.entities import AppointmentStats
from barbershop.domain.interfaces import IAppointmentReader

DateLike = Union[date, datetime]


class StatsService:
    """Read-only summaries over non-cancelled appointments."""

    def __init__(self, appointment_repo: IAppointmentReader):
        self.appointment_repo = appointment_repo

    def get_stats(self, start: DateLike, end: DateLike) -> AppointmentStats:
        """Counts and revenue for appointments starting in [start, end].

        A bare ``date`` as ``end`` covers that whole day.
        """
        range_start = (
            start if isinstance(start, datetime) else datetime.combine(start, time.min)
        )
        range_end = end if isinstance(end, datetime) else datetime.combine(end, time.max)
        if range_end < range_start:
            raise ValidationError(["end_date: must not be before start_date"])

        stats = self.appointment_repo.aggregate_stats(range_start, range_end)
        stats.count_by_day = dict(sorted(stats.count_by_day.items()))
        return stats
