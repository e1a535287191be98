"""
Half-open time intervals.

`TimeInterval.overlaps` is the single overlap test used by conflict
detection and slot generation. Intervals are `[start, end)`, so two
intervals that only touch (one ends exactly when the other starts) do not
overlap.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from barbershop.core.exceptions import ValidationError


@dataclass(frozen=True)
class TimeInterval:
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end <= self.start:
            raise ValidationError(["interval: end must be after start"])

    @classmethod
    def from_duration(cls, start: datetime, duration_minutes: int) -> "TimeInterval":
        """Build `[start, start + duration)`; duration must be positive."""
        if (
            isinstance(duration_minutes, bool)
            or not isinstance(duration_minutes, int)
            or duration_minutes <= 0
        ):
            raise ValidationError(
                ["duration: must be a positive number of minutes"]
            )
        return cls(start, start + timedelta(minutes=duration_minutes))

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def overlaps(self, other: "TimeInterval") -> bool:
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"
