from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import LeaveStatus, LeaveType
from ..core.patch import UNSET, Changes


@dataclass(frozen=True)
class LeaveRequest:
    """A leave application.

    ``days`` is derived from the date range. ``applied_date`` is set once,
    when the request is created.
    """

    leave_id: int
    employee_id: int
    employee_name: str
    department: Optional[str]
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    reason: str
    applied_date: date
    status: LeaveStatus = LeaveStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class LeaveChanges(Changes):
    payload_keys = {
        "leave_type": "leaveType",
        "start_date": "startDate",
        "end_date": "endDate",
    }

    leave_type: Any = UNSET
    start_date: Any = UNSET
    end_date: Any = UNSET
    reason: Any = UNSET
    status: Any = UNSET


@dataclass(frozen=True)
class LeaveQuery:
    employee_id: Optional[int] = None
    search: Optional[str] = None
    status: Optional[LeaveStatus] = None
    leave_type: Optional[LeaveType] = None
    offset: int = 0
    limit: int = 10
