from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceQuery, AttendanceRecord


class AttendanceRepository(Protocol):
    """Repository interface for attendance records.

    At most one record exists per (employee_id, work_date); ``insert`` and
    ``update`` raise ConflictError when a write would break that.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list(self, query: AttendanceQuery) -> tuple[Sequence[AttendanceRecord], int]:
        """Newest work date first, then newest created first."""

        raise NotImplementedError

    def insert(self, record: AttendanceRecord) -> int:
        raise NotImplementedError

    def update(self, record: AttendanceRecord) -> None:
        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError
