"""
Generation of the fixed candidate slots for a calendar day.
"""

import logging
from typing import List

from pendulum import DateTime

from .exceptions import InvalidConfiguration
from .models import OperatingHours, TimeRange

logger = logging.getLogger(__name__)


def generate_slots(
    day: DateTime,
    slot_minutes: int,
    operating_hours: OperatingHours
) -> List[TimeRange]:
    """
    Split the operating window of ``day`` into contiguous slots.

    Example:
    Window: 09:00 - 10:45, slot_minutes=30
    Result: [09:00-09:30, 09:30-10:00, 10:00-10:30]  (10:30-10:45 is dropped)

    Args:
        day: Any instant on the day to build the grid for
        slot_minutes: Length of each slot in minutes
        operating_hours: Opening window as times of day

    Returns:
        List of TimeRange objects ordered by start time

    Raises:
        InvalidConfiguration: If the window is empty or slot_minutes <= 0
    """
    if slot_minutes <= 0:
        raise InvalidConfiguration(f"Slot duration must be positive, got {slot_minutes} minutes")

    if not operating_hours.is_valid():
        raise InvalidConfiguration(
            f"Operating window end {operating_hours.end_time} must be later than "
            f"start {operating_hours.start_time}"
        )

    window = operating_hours.window_for_day(day)
    slots: List[TimeRange] = []
    current = window.start

    while True:
        slot_end = current.add(minutes=slot_minutes)
        # Partial trailing slots are never emitted
        if slot_end > window.end:
            break
        slots.append(TimeRange(start=current, end=slot_end))
        current = slot_end

    logger.debug("Generated %d slots of %d minutes for %s", len(slots), slot_minutes, window)
    return slots
