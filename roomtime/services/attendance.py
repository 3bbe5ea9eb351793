"""
Application service computing net worked time for attendance records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol

from ..domain.duration import DurationResult, attendance_duration
from ..domain.models import AttendanceRecord, NetDuration

logger = logging.getLogger(__name__)


class AttendanceSourceProtocol(Protocol):
    """Read-only access to attendance records."""

    async def get_attendance(self, user_id: str) -> List[AttendanceRecord]:
        """Return the attendance records of a user."""


@dataclass(frozen=True)
class AttendanceRow:
    """An attendance record paired with its computed duration."""
    record: AttendanceRecord
    duration: DurationResult


class AttendanceService:
    """Fetches attendance records and attaches the net duration to each."""

    def __init__(self, attendance_source: AttendanceSourceProtocol) -> None:
        self._attendance_source = attendance_source

    async def rows_for_user(self, user_id: str) -> List[AttendanceRow]:
        records = await self._attendance_source.get_attendance(user_id)
        return self.compute_rows(records)

    @staticmethod
    def compute_rows(records: List[AttendanceRecord]) -> List[AttendanceRow]:
        """Compute durations, newest clock-in first."""
        ordered = sorted(records, key=lambda r: r.clock_in, reverse=True)
        rows = [
            AttendanceRow(
                record=record,
                duration=attendance_duration(record.clock_in, record.clock_out, record.breaks),
            )
            for record in ordered
        ]
        logger.debug("Computed %d attendance rows", len(rows))
        return rows

    @staticmethod
    def total_worked(rows: List[AttendanceRow]) -> NetDuration:
        """Sum of complete rows; open sessions are skipped."""
        return NetDuration(
            total_ms=sum(row.duration.total_ms for row in rows if isinstance(row.duration, NetDuration))
        )
