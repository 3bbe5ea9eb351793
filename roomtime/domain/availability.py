"""
Classification of slots against existing reservations and the current instant.

Pure functions: nothing is cached between calls, so callers re-run the
classification whenever the reservation set or the day changes.
"""

from typing import Iterable, List, Sequence

from pendulum import DateTime

from .models import Reservation, Slot, SlotStatus, TimeRange


def find_conflicts(
    candidate: TimeRange,
    reservations: Iterable[Reservation]
) -> List[Reservation]:
    """
    Return the reservations that overlap the candidate range.

    Back-to-back reservations (end == start) are not conflicts.
    """
    return [
        reservation for reservation in reservations
        if candidate.overlaps(reservation.time_range)
    ]


def classify_slot(
    time_range: TimeRange,
    now: DateTime,
    reservations: Sequence[Reservation]
) -> SlotStatus:
    """Status of a single slot; PAST wins over BOOKED."""
    if time_range.end <= now:
        return SlotStatus.PAST

    if find_conflicts(time_range, reservations):
        return SlotStatus.BOOKED

    return SlotStatus.AVAILABLE


def classify_slots(
    slots: Iterable[TimeRange],
    now: DateTime,
    reservations: Iterable[Reservation]
) -> List[Slot]:
    """
    Assign exactly one status to every slot of the grid.

    Args:
        slots: Slot grid as produced by ``generate_slots``
        now: Reference instant; a slot ending at or before it is PAST
        reservations: Existing reservations for the same resource

    Returns:
        New list of Slot objects in grid order
    """
    reservation_list = list(reservations)

    return [
        Slot(time_range=time_range, status=classify_slot(time_range, now, reservation_list))
        for time_range in slots
    ]


def available_slots(classified: Iterable[Slot]) -> List[Slot]:
    """Keep only slots that can still be selected."""
    return [slot for slot in classified if slot.is_available]
