"""
Application service for booking meeting rooms.

The service fetches reservations through a read-only source, delegates the
slot reasoning to the domain layer, and hands the validated interval to a
booking submitter. Collaborators are plain protocols so the JSON store or a
stub can be plugged in.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

from pendulum import DateTime

from ..domain.availability import classify_slots, find_conflicts
from ..domain.exceptions import BookingConflictError, MissingBookingDetails
from ..domain.models import BookingRequest, OperatingHours, Reservation, Slot, TimeRange
from ..domain.selection import SelectionReducer
from ..domain.slot_grid import generate_slots
from .events import BOOKINGS_CHANGED, RefreshChannel

logger = logging.getLogger(__name__)


class ReservationSourceProtocol(Protocol):
    """Read-only access to existing reservations."""

    async def get_reservations(
        self,
        resource_id: str,
        start_time: DateTime,
        end_time: DateTime,
    ) -> List[Reservation]:
        """Return reservations of the resource overlapping the window."""


class BookingSubmitterProtocol(Protocol):
    """Persists bookings and performs the authoritative overlap check."""

    async def create_booking(self, request: BookingRequest) -> Reservation:
        """Commit the booking or raise BookingConflictError."""


class BookingService:
    """
    Orchestrates reservation retrieval, slot classification and submission.

    Local checks are advisory only: the submitter's verdict at commit time is
    authoritative and its BookingConflictError is passed through unchanged.
    """

    def __init__(
        self,
        reservation_source: ReservationSourceProtocol,
        booking_submitter: BookingSubmitterProtocol,
        operating_hours: OperatingHours,
        slot_minutes: int = 30,
        require_contiguous: bool = False,
        refresh_channel: Optional[RefreshChannel] = None,
    ) -> None:
        self._reservation_source = reservation_source
        self._booking_submitter = booking_submitter
        self._operating_hours = operating_hours
        self._slot_minutes = slot_minutes
        self._reducer = SelectionReducer(require_contiguous=require_contiguous)
        self._refresh_channel = refresh_channel

    async def fetch_reservations(
        self,
        *,
        resource_id: str,
        day: DateTime,
    ) -> List[Reservation]:
        """Fetch the reservations of one resource for a whole day."""
        start = day.start_of("day")
        end = start.add(days=1)

        reservations = await self._reservation_source.get_reservations(
            resource_id=resource_id,
            start_time=start,
            end_time=end,
        )

        return self._for_resource(resource_id, reservations)

    def classify(
        self,
        *,
        day: DateTime,
        now: DateTime,
        reservations: Sequence[Reservation],
    ) -> List[Slot]:
        """Build and classify the slot grid for a day."""
        grid = generate_slots(day, self._slot_minutes, self._operating_hours)
        return classify_slots(grid, now, reservations)

    async def get_slots(
        self,
        *,
        resource_id: str,
        day: DateTime,
        now: DateTime,
    ) -> List[Slot]:
        """Fresh classification of the day's slots for a resource."""
        reservations = await self.fetch_reservations(resource_id=resource_id, day=day)
        return self.classify(day=day, now=now, reservations=reservations)

    async def book(
        self,
        *,
        resource_id: str,
        day: DateTime,
        selection: Sequence[Slot],
        now: DateTime,
        title: str,
        notes: str = "",
        owner_id: Optional[str] = None,
    ) -> Reservation:
        """
        Validate a selection against fresh data and submit the booking.

        Raises:
            MissingBookingDetails: If resource or title is empty
            SelectionError: If the selection is empty, stale or has a required gap
            BookingConflictError: If the interval overlaps a reservation
        """
        if not resource_id:
            raise MissingBookingDetails("Please select a meeting room.")
        if not title.strip():
            raise MissingBookingDetails("Please enter a meeting title.")

        reservations = await self.fetch_reservations(resource_id=resource_id, day=day)
        grid = self.classify(day=day, now=now, reservations=reservations)
        candidate = self._reducer.reduce(selection, grid)

        # A bridged gap may still cover someone else's booking
        self._ensure_free(candidate, reservations)

        request = BookingRequest(
            resource_id=resource_id,
            time_range=candidate,
            title=title.strip(),
            notes=notes,
            owner_id=owner_id,
        )

        try:
            reservation = await self._booking_submitter.create_booking(request)
        except BookingConflictError as exc:
            logger.warning("Booking of %s for %s rejected at commit: %s", resource_id, candidate, exc)
            raise

        logger.info("Booked %s for %s (%s)", resource_id, candidate, reservation.id)

        if self._refresh_channel is not None:
            self._refresh_channel.publish(
                BOOKINGS_CHANGED,
                {"resource_id": resource_id, "reservation_id": reservation.id},
            )

        return reservation

    @staticmethod
    def _ensure_free(candidate: TimeRange, reservations: Sequence[Reservation]) -> None:
        conflicts = find_conflicts(candidate, reservations)
        if conflicts:
            raise BookingConflictError(
                f"{candidate.label()} overlaps {len(conflicts)} existing booking(s). "
                "Please choose other slots.",
                conflicts=conflicts,
            )

    @staticmethod
    def _for_resource(
        resource_id: str,
        reservations: Sequence[Reservation],
    ) -> List[Reservation]:
        """
        Keep only reservations of the requested resource.

        Some sources return every booking of the day; conflicts are per room.
        """
        return [r for r in reservations if r.resource_id == resource_id]
