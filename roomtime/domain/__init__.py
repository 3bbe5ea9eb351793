"""
Domain layer - Pure interval logic without external dependencies.
"""

from .availability import available_slots, classify_slots, find_conflicts
from .duration import attendance_duration, compute_duration, merge_ranges
from .exceptions import (
    BookingConflictError,
    DataSourceError,
    EmptySelection,
    InvalidConfiguration,
    InvalidInterval,
    InvalidSelection,
    MissingBookingDetails,
    NonContiguousSelection,
    RoomtimeError,
    SelectionError,
)
from .models import (
    AttendanceRecord,
    BookingRequest,
    IncompleteDuration,
    NetDuration,
    OperatingHours,
    Reservation,
    Slot,
    SlotStatus,
    TimeRange,
)
from .selection import SelectionReducer, reduce_selection
from .slot_grid import generate_slots

__all__ = [
    "AttendanceRecord",
    "BookingConflictError",
    "BookingRequest",
    "DataSourceError",
    "EmptySelection",
    "IncompleteDuration",
    "InvalidConfiguration",
    "InvalidInterval",
    "InvalidSelection",
    "MissingBookingDetails",
    "NetDuration",
    "NonContiguousSelection",
    "OperatingHours",
    "Reservation",
    "RoomtimeError",
    "SelectionError",
    "SelectionReducer",
    "Slot",
    "SlotStatus",
    "TimeRange",
    "attendance_duration",
    "available_slots",
    "classify_slots",
    "compute_duration",
    "find_conflicts",
    "generate_slots",
    "merge_ranges",
    "reduce_selection",
]
