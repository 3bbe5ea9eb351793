"""
JSON file backed store for reservations and attendance records.

Stands in for the remote data API: the CLI and the tests read reservations
from it and commit bookings to it.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.availability import find_conflicts
from ..domain.exceptions import BookingConflictError, DataSourceError
from ..domain.models import AttendanceRecord, BookingRequest, Reservation, TimeRange

logger = logging.getLogger(__name__)


class JsonStore:
    """
    Reservation source, booking submitter and attendance source in one file.

    File layout:
        {"reservations": [{"id", "resource_id", "start", "end", "title"}],
         "attendance": [{"id", "user_id", "clock_in", "clock_out", "breaks", "status"}]}
    """

    def __init__(self, data_file: Optional[Path] = None, timezone: str = "UTC"):
        """
        Initialize the store.

        Args:
            data_file: JSON file to read from and write to; None keeps data in memory
            timezone: IANA timezone used for timestamps without an offset
        """
        self.data_file = data_file
        self.timezone = timezone
        self._data: Dict[str, List[Dict[str, Any]]] = {"reservations": [], "attendance": []}
        self._load()

    def _load(self) -> None:
        """Load data from the JSON file, if it exists."""
        if self.data_file is None or not self.data_file.exists():
            return

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise DataSourceError(f"Could not read data file {self.data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise DataSourceError("Data file must contain a mapping at the root level.")

        self._data["reservations"] = list(data.get("reservations") or [])
        self._data["attendance"] = list(data.get("attendance") or [])

    def _save(self, data: Dict[str, List[Dict[str, Any]]]) -> None:
        """Write ``data`` to a sibling temp file, then move it over the data file."""
        if self.data_file is None:
            return

        tmp_file = self.data_file.with_name(f".{self.data_file.name}.tmp")
        try:
            with open(tmp_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp_file.replace(self.data_file)
        except OSError as exc:
            tmp_file.unlink(missing_ok=True)
            raise DataSourceError(f"Could not write data file {self.data_file}: {exc}") from exc

    def _parse(self, value: str) -> DateTime:
        return pendulum.parse(value, tz=self.timezone)

    def _parse_reservation(self, raw: Dict[str, Any]) -> Optional[Reservation]:
        try:
            return Reservation(
                id=str(raw["id"]),
                resource_id=str(raw["resource_id"]),
                time_range=TimeRange(start=self._parse(raw["start"]), end=self._parse(raw["end"])),
                title=raw.get("title", ""),
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping invalid reservation %r: %s", raw.get("id"), exc)
            return None

    def _parse_attendance(self, raw: Dict[str, Any]) -> Optional[AttendanceRecord]:
        try:
            clock_out = raw.get("clock_out")
            return AttendanceRecord(
                id=str(raw["id"]),
                user_id=str(raw["user_id"]),
                clock_in=self._parse(raw["clock_in"]),
                clock_out=self._parse(clock_out) if clock_out else None,
                breaks=[
                    TimeRange(start=self._parse(b["start"]), end=self._parse(b["end"]))
                    for b in raw.get("breaks") or []
                ],
                status=raw.get("status", ""),
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping invalid attendance record %r: %s", raw.get("id"), exc)
            return None

    def all_reservations(self) -> List[Reservation]:
        parsed = (self._parse_reservation(raw) for raw in self._data["reservations"])
        return [r for r in parsed if r is not None]

    async def get_reservations(
        self,
        resource_id: str,
        start_time: DateTime,
        end_time: DateTime,
    ) -> List[Reservation]:
        """
        Reservations of a resource overlapping ``[start_time, end_time)``.
        """
        window = TimeRange(start=start_time, end=end_time)

        return [
            r for r in self.all_reservations()
            if r.resource_id == resource_id and window.overlaps(r.time_range)
        ]

    async def create_booking(self, request: BookingRequest) -> Reservation:
        """
        Commit a booking after the authoritative overlap check.

        Raises:
            BookingConflictError: If the interval overlaps an existing booking
        """
        existing = [r for r in self.all_reservations() if r.resource_id == request.resource_id]
        conflicts = find_conflicts(request.time_range, existing)
        if conflicts:
            raise BookingConflictError(
                f"{request.resource_id} is already booked during {request.time_range.label()}. "
                "Please refresh and try again.",
                conflicts=conflicts,
            )

        reservation = Reservation(
            id=uuid.uuid4().hex[:12],
            resource_id=request.resource_id,
            time_range=request.time_range,
            title=request.title,
        )
        # In-memory data only changes once the file write succeeded
        updated = dict(self._data)
        updated["reservations"] = self._data["reservations"] + [
            {
                "id": reservation.id,
                "resource_id": reservation.resource_id,
                "start": reservation.time_range.start.to_iso8601_string(),
                "end": reservation.time_range.end.to_iso8601_string(),
                "title": reservation.title,
                "notes": request.notes,
                "owner_id": request.owner_id,
            }
        ]
        self._save(updated)
        self._data = updated

        logger.info("Stored reservation %s for %s", reservation.id, reservation.resource_id)
        return reservation

    async def get_attendance(self, user_id: str) -> List[AttendanceRecord]:
        """Attendance records of one user."""
        parsed = (self._parse_attendance(raw) for raw in self._data["attendance"])
        return [r for r in parsed if r is not None and r.user_id == user_id]
