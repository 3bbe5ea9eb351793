"""
Domain models for interval, slot and duration calculations.
"""

from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from typing import List, Optional

from pendulum import DateTime

from .exceptions import InvalidInterval

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 60 * MS_PER_MINUTE


def epoch_ms(instant: DateTime) -> int:
    """Whole milliseconds since the epoch, without float rounding."""
    return instant.int_timestamp * 1000 + instant.microsecond // 1000


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range ``[start, end)``.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidInterval(f"Start time {self.start} must be before end time {self.end}")

    def duration_ms(self) -> int:
        """Return the duration in whole milliseconds."""
        return epoch_ms(self.end) - epoch_ms(self.start)

    def duration_minutes(self) -> int:
        """Return the duration in whole minutes."""
        return self.duration_ms() // MS_PER_MINUTE

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range shares at least one instant with another."""
        return self.start < other.end and other.start < self.end

    def touches(self, other: "TimeRange") -> bool:
        """Check if the ranges are back-to-back without overlapping."""
        return self.end == other.start or other.end == self.start

    def intersect(self, other: "TimeRange") -> "TimeRange | None":
        """
        Calculate the intersection of two time ranges.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        start = max(self.start, other.start)
        end = min(self.end, other.end)

        return TimeRange(start=start, end=end)

    def label(self) -> str:
        """Day-relative label, e.g. ``09:00–09:30``."""
        return f"{self.start.format('HH:mm')}–{self.end.format('HH:mm')}"

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass
class OperatingHours:
    """
    Opening window of a resource, expressed as times of day.
    """
    start_time: time
    end_time: time

    def is_valid(self) -> bool:
        return self.start_time < self.end_time

    def window_for_day(self, day: DateTime) -> TimeRange:
        """
        Get the operating window for a specific day.
        """
        start = day.set(
            hour=self.start_time.hour,
            minute=self.start_time.minute,
            second=0,
            microsecond=0
        )
        end = day.set(
            hour=self.end_time.hour,
            minute=self.end_time.minute,
            second=0,
            microsecond=0
        )

        return TimeRange(start=start, end=end)


class SlotStatus(str, Enum):
    AVAILABLE = "available"
    PAST = "past"
    BOOKED = "booked"


@dataclass(frozen=True)
class Slot:
    """
    A generated candidate slot together with its derived status.
    """
    time_range: TimeRange
    status: SlotStatus = SlotStatus.AVAILABLE

    @property
    def label(self) -> str:
        return self.time_range.label()

    @property
    def is_available(self) -> bool:
        return self.status is SlotStatus.AVAILABLE


@dataclass(frozen=True)
class Reservation:
    """
    A committed booking of a resource. Read-only for the engine.
    """
    id: str
    resource_id: str
    time_range: TimeRange
    title: str = ""


@dataclass(frozen=True)
class BookingRequest:
    """Validated interval plus the metadata the booking collaborator needs."""
    resource_id: str
    time_range: TimeRange
    title: str
    notes: str = ""
    owner_id: Optional[str] = None


@dataclass(frozen=True)
class NetDuration:
    """
    Net elapsed time in whole milliseconds.

    Hours and minutes are derived by integer division; seconds are truncated.
    """
    total_ms: int

    is_complete = True

    @property
    def hours(self) -> int:
        return self.total_ms // MS_PER_HOUR

    @property
    def minutes(self) -> int:
        return (self.total_ms // MS_PER_MINUTE) % 60

    @property
    def total_minutes(self) -> int:
        return self.total_ms // MS_PER_MINUTE

    def format_display(self) -> str:
        return f"{self.hours}h {self.minutes}m"

    def __str__(self) -> str:
        return self.format_display()


@dataclass(frozen=True)
class IncompleteDuration:
    """
    Marker for a duration that cannot be computed yet (no clock-out).
    """
    reason: str = "no clock-out recorded"

    is_complete = False

    def format_display(self) -> str:
        return "-"

    def __str__(self) -> str:
        return self.format_display()


@dataclass
class AttendanceRecord:
    """
    One attendance session of a person.
    """
    id: str
    user_id: str
    clock_in: DateTime
    clock_out: Optional[DateTime] = None
    breaks: List[TimeRange] = field(default_factory=list)
    status: str = ""
