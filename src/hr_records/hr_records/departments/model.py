from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import DepartmentStatus
from ..core.patch import UNSET, Changes
from ..employees.model import Employee

DUPLICATE_NAME = "Department name already exists"


@dataclass(frozen=True)
class Department:
    """Domain entity: a department.

    Employees belong to a department by name (``Employee.department``), and
    ``manager_id`` is a weak employee reference; neither is enforced.
    """

    department_id: int
    name: str
    established_date: date
    status: DepartmentStatus = DepartmentStatus.ACTIVE
    description: Optional[str] = None
    manager_id: Optional[int] = None
    budget: Optional[float] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class DepartmentView:
    """Department with its manager reference resolved (None when dangling)."""

    department: Department
    manager: Optional[Employee] = None


@dataclass(frozen=True)
class DepartmentChanges(Changes):
    payload_keys = {
        "manager_id": "manager",
        "established_date": "establishedDate",
    }

    name: Any = UNSET
    description: Any = UNSET
    manager_id: Any = UNSET
    budget: Any = UNSET
    location: Any = UNSET
    established_date: Any = UNSET
    status: Any = UNSET


@dataclass(frozen=True)
class DepartmentQuery:
    search: Optional[str] = None
    status: Optional[DepartmentStatus] = None
    offset: int = 0
    limit: int = 10
