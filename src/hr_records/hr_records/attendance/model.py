from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import AttendanceStatus
from ..core.patch import UNSET, Changes

DUPLICATE_ATTENDANCE = "Attendance record already exists for this employee and date"


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's attendance for one day.

    ``employee_name``/``department`` are snapshotted from the employee at
    creation. ``hours`` is derived from ``check_in``/``check_out``.
    """

    attendance_id: int
    employee_id: int
    employee_name: str
    department: Optional[str]
    work_date: date
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    hours: float = 0.0
    status: AttendanceStatus = AttendanceStatus.PRESENT
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceChanges(Changes):
    payload_keys = {
        "work_date": "date",
        "check_in": "checkIn",
        "check_out": "checkOut",
    }

    work_date: Any = UNSET
    check_in: Any = UNSET
    check_out: Any = UNSET
    status: Any = UNSET
    notes: Any = UNSET


@dataclass(frozen=True)
class AttendanceQuery:
    employee_id: Optional[int] = None
    search: Optional[str] = None
    status: Optional[AttendanceStatus] = None
    work_date: Optional[date] = None
    offset: int = 0
    limit: int = 10
