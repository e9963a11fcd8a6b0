from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import today_local
from ..common.pagination import Page, PageRequest
from ..common.validators import FieldErrors
from ..core.enums import DepartmentStatus, Operation, RecordType
from ..core.exceptions import ConflictError, NotFoundError
from ..core.patch import is_set
from ..core.principal import Principal
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..policy.model import ensure_allowed
from ..policy.rules import decide
from .model import DUPLICATE_NAME, Department, DepartmentChanges, DepartmentQuery, DepartmentView
from .repository import DepartmentRepository

logger = logging.getLogger(__name__)


class DepartmentService:
    """Use cases: manage departments (admin only)."""

    def __init__(self, departments: DepartmentRepository, employees: EmployeeRepository):
        self._departments = departments
        self._employees = employees

    def _require(self, department_id: int) -> Department:
        department = self._departments.get_by_id(int(department_id))
        if not department:
            raise NotFoundError("Department not found")
        return department

    def resolve_manager(self, department: Department) -> Optional[Employee]:
        if department.manager_id is None:
            return None
        return self._employees.get_by_id(department.manager_id)

    def resolve_members(self, department: Department) -> Sequence[Employee]:
        """Employees whose ``department`` string equals the department name."""
        return self._employees.list_by_department(department.name)

    def _view(self, department: Department) -> DepartmentView:
        return DepartmentView(department=department, manager=self.resolve_manager(department))

    def list(self, principal: Principal, *, page: PageRequest, search: str = "", status: str = "") -> Page[DepartmentView]:
        ensure_allowed(decide(principal, RecordType.DEPARTMENT, Operation.LIST))

        errors = FieldErrors()
        status_filter = errors.choice(status, "status", DepartmentStatus, required=False)
        errors.raise_if_any()

        items, total = self._departments.list(
            DepartmentQuery(
                search=(search or "").strip() or None,
                status=status_filter,
                offset=page.offset,
                limit=page.limit,
            )
        )
        return Page(items=[self._view(d) for d in items], total=total, page=page.page, limit=page.limit)

    def get(self, principal: Principal, department_id: int) -> DepartmentView:
        department = self._require(department_id)
        ensure_allowed(decide(principal, RecordType.DEPARTMENT, Operation.READ))
        return self._view(department)

    def list_employees(self, principal: Principal, department_id: int) -> Sequence[Employee]:
        department = self._require(department_id)
        ensure_allowed(decide(principal, RecordType.DEPARTMENT, Operation.READ))
        return self.resolve_members(department)

    def create(self, principal: Principal, payload: Mapping[str, Any]) -> DepartmentView:
        ensure_allowed(decide(principal, RecordType.DEPARTMENT, Operation.CREATE))

        errors = FieldErrors()
        name = errors.text(payload.get("name"), "name", message="Department name is required")
        description = errors.text(payload.get("description"), "description", required=False)
        manager_id = errors.identifier(payload.get("manager"), "manager", required=False)
        budget = errors.number(payload.get("budget"), "budget", required=False, message="Budget must be a positive number")
        location = errors.text(payload.get("location"), "location", required=False)
        established = errors.date(payload.get("establishedDate"), "establishedDate", required=False)
        status = errors.choice(payload.get("status"), "status", DepartmentStatus, required=False)
        errors.raise_if_any()

        if self._departments.get_by_name(name):
            raise ConflictError(DUPLICATE_NAME)

        department_id = self._departments.insert(
            Department(
                department_id=0,
                name=name,
                description=description,
                manager_id=manager_id,
                budget=budget,
                location=location,
                established_date=established or today_local(),
                status=status or DepartmentStatus.ACTIVE,
            )
        )
        logger.info("department %s (%s) created by user %s", department_id, name, principal.user_id)
        return self._view(self._require(department_id))

    def update(self, principal: Principal, department_id: int, changes: DepartmentChanges) -> DepartmentView:
        current = self._require(department_id)
        ensure_allowed(decide(principal, RecordType.DEPARTMENT, Operation.UPDATE))

        errors = FieldErrors()
        updates: dict[str, Any] = {}
        if is_set(changes.name):
            updates["name"] = errors.text(changes.name, "name", message="Department name cannot be empty")
        if is_set(changes.description):
            updates["description"] = errors.text(changes.description, "description", required=False)
        if is_set(changes.manager_id):
            updates["manager_id"] = errors.identifier(changes.manager_id, "manager", required=False)
        if is_set(changes.budget):
            updates["budget"] = errors.number(changes.budget, "budget", required=False, message="Budget must be a positive number")
        if is_set(changes.location):
            updates["location"] = errors.text(changes.location, "location", required=False)
        if is_set(changes.established_date):
            updates["established_date"] = errors.date(changes.established_date, "establishedDate")
        if is_set(changes.status):
            updates["status"] = errors.choice(changes.status, "status", DepartmentStatus)
        errors.raise_if_any()

        new_name = updates.get("name")
        if new_name and new_name != current.name:
            other = self._departments.get_by_name(new_name)
            if other and other.department_id != current.department_id:
                raise ConflictError(DUPLICATE_NAME)

        if updates:
            # Renaming does not touch Employee.department; members must be reassigned separately.
            self._departments.update(replace(current, **updates))
            logger.info("department %s updated by user %s (%s)", current.department_id, principal.user_id, sorted(updates))
        return self._view(self._require(current.department_id))

    def delete(self, principal: Principal, department_id: int) -> None:
        current = self._require(department_id)
        ensure_allowed(decide(principal, RecordType.DEPARTMENT, Operation.DELETE))

        if self._employees.count_by_department(current.name) > 0:
            raise ConflictError("Cannot delete department with employees. Please reassign employees first.")
        if not self._departments.delete_by_id(current.department_id):
            raise NotFoundError("Department not found")
        logger.info("department %s deleted by user %s", current.department_id, principal.user_id)
