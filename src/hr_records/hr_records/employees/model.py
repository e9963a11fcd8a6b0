from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import EmployeeStatus
from ..core.patch import UNSET, Changes

DUPLICATE_EMAIL = "Employee with this email already exists"


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee. Referenced by id from other records."""

    employee_id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    department: str
    salary: float
    hire_date: date
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    position: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class EmployeeChanges(Changes):
    payload_keys = {
        "first_name": "firstName",
        "last_name": "lastName",
        "hire_date": "hireDate",
    }

    first_name: Any = UNSET
    last_name: Any = UNSET
    email: Any = UNSET
    phone: Any = UNSET
    position: Any = UNSET
    department: Any = UNSET
    salary: Any = UNSET
    hire_date: Any = UNSET
    status: Any = UNSET
    notes: Any = UNSET


@dataclass(frozen=True)
class EmployeeQuery:
    search: Optional[str] = None
    department: Optional[str] = None
    status: Optional[EmployeeStatus] = None
    offset: int = 0
    limit: int = 10


@dataclass(frozen=True)
class EmployeeStats:
    """Read-model for the dashboard overview."""

    total_employees: int
    active_employees: int
    avg_salary: float
    department_counts: list[tuple[str, int]] = field(default_factory=list)
