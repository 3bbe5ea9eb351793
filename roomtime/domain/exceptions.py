"""
Domain-specific exception hierarchy for the roomtime engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models import Reservation, Slot


class RoomtimeError(Exception):
    """Base class for all application-level errors."""


class InvalidInterval(RoomtimeError, ValueError):
    """Raised when a time range is empty or inverted."""


class InvalidConfiguration(RoomtimeError):
    """Raised when slot grid parameters cannot produce a grid."""


class SelectionError(RoomtimeError):
    """Base class for user-correctable selection problems."""


class EmptySelection(SelectionError):
    """Raised when no slot was selected."""

    def __init__(self, message: str = "Please select at least one time slot.") -> None:
        super().__init__(message)


class InvalidSelection(SelectionError):
    """Raised when a selected slot is no longer available."""

    def __init__(self, slots: Sequence["Slot"]) -> None:
        self.slots = list(slots)
        labels = ", ".join(slot.label for slot in self.slots)
        super().__init__(f"Selected slot(s) no longer available: {labels}")


class NonContiguousSelection(SelectionError):
    """Raised when contiguity is required and the selection has a gap."""


class BookingConflictError(RoomtimeError):
    """Raised when a booking is rejected at commit time because of an overlap."""

    def __init__(self, message: str, conflicts: Sequence["Reservation"] = ()) -> None:
        self.conflicts = list(conflicts)
        super().__init__(message)


class DataSourceError(RoomtimeError):
    """Raised when reservation or attendance data cannot be read or parsed."""


class MissingBookingDetails(RoomtimeError, ValueError):
    """Raised when a booking lacks a title or a resource."""
