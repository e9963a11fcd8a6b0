from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional

from ..common.datetime_utils import today_local
from ..common.pagination import Page, PageRequest
from ..common.validators import FieldErrors
from ..core.enums import EmployeeStatus, Operation, RecordType
from ..core.exceptions import ConflictError, NotFoundError
from ..core.patch import is_set
from ..core.principal import Principal
from ..policy.model import ensure_allowed
from ..policy.rules import decide
from .model import DUPLICATE_EMAIL, Employee, EmployeeChanges, EmployeeQuery
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


def _email(errors: FieldErrors, value: Any) -> Optional[str]:
    email = errors.text(value, "email", message="Valid email is required")
    if email is None:
        return None
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        errors.add("email", "Valid email is required")
        return None
    return email.lower()


class EmployeeService:
    """Use cases: manage employee records (admin) and the employee's own profile."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def _require(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list(
        self,
        principal: Principal,
        *,
        page: PageRequest,
        search: str = "",
        department: str = "",
        status: str = "",
    ) -> Page[Employee]:
        ensure_allowed(decide(principal, RecordType.EMPLOYEE, Operation.LIST))

        errors = FieldErrors()
        status_filter = errors.choice(status, "status", EmployeeStatus, required=False)
        errors.raise_if_any()

        items, total = self._employees.list(
            EmployeeQuery(
                search=(search or "").strip() or None,
                department=(department or "").strip() or None,
                status=status_filter,
                offset=page.offset,
                limit=page.limit,
            )
        )
        return Page(items=items, total=total, page=page.page, limit=page.limit)

    def get(self, principal: Principal, employee_id: int) -> Employee:
        employee = self._require(employee_id)
        ensure_allowed(decide(principal, RecordType.EMPLOYEE, Operation.READ, owner_id=employee.employee_id))
        return employee

    def create(self, principal: Principal, payload: Mapping[str, Any]) -> Employee:
        ensure_allowed(decide(principal, RecordType.EMPLOYEE, Operation.CREATE))

        errors = FieldErrors()
        first_name = errors.text(payload.get("firstName"), "firstName")
        last_name = errors.text(payload.get("lastName"), "lastName")
        email = _email(errors, payload.get("email"))
        phone = errors.text(payload.get("phone"), "phone")
        position = errors.text(payload.get("position"), "position", required=False)
        department = errors.text(payload.get("department"), "department")
        salary = errors.number(payload.get("salary"), "salary", message="Salary must be a positive number")
        hire_date = errors.date(payload.get("hireDate"), "hireDate", required=False)
        status = errors.choice(payload.get("status"), "status", EmployeeStatus, required=False)
        notes = errors.text(payload.get("notes"), "notes", required=False)
        errors.raise_if_any()

        if self._employees.get_by_email(email):
            raise ConflictError(DUPLICATE_EMAIL)

        employee = Employee(
            employee_id=0,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            position=position,
            department=department,
            salary=salary,
            hire_date=hire_date or today_local(),
            status=status or EmployeeStatus.ACTIVE,
            notes=notes,
        )
        employee_id = self._employees.insert(employee)
        logger.info("employee %s created by user %s", employee_id, principal.user_id)
        return self._require(employee_id)

    def update(self, principal: Principal, employee_id: int, changes: EmployeeChanges) -> Employee:
        current = self._require(employee_id)
        ensure_allowed(decide(principal, RecordType.EMPLOYEE, Operation.UPDATE, owner_id=current.employee_id))

        errors = FieldErrors()
        updates: dict[str, Any] = {}
        if is_set(changes.first_name):
            updates["first_name"] = errors.text(changes.first_name, "firstName")
        if is_set(changes.last_name):
            updates["last_name"] = errors.text(changes.last_name, "lastName")
        if is_set(changes.email):
            updates["email"] = _email(errors, changes.email)
        if is_set(changes.phone):
            updates["phone"] = errors.text(changes.phone, "phone")
        if is_set(changes.position):
            updates["position"] = errors.text(changes.position, "position", required=False)
        if is_set(changes.department):
            updates["department"] = errors.text(changes.department, "department")
        if is_set(changes.salary):
            updates["salary"] = errors.number(changes.salary, "salary", message="Salary must be a positive number")
        if is_set(changes.hire_date):
            updates["hire_date"] = errors.date(changes.hire_date, "hireDate")
        if is_set(changes.status):
            updates["status"] = errors.choice(changes.status, "status", EmployeeStatus)
        if is_set(changes.notes):
            updates["notes"] = errors.text(changes.notes, "notes", required=False)
        errors.raise_if_any()

        new_email = updates.get("email")
        if new_email and new_email != current.email:
            other = self._employees.get_by_email(new_email)
            if other and other.employee_id != current.employee_id:
                raise ConflictError(DUPLICATE_EMAIL)

        if updates:
            self._employees.update(replace(current, **updates))
            logger.info("employee %s updated by user %s (%s)", current.employee_id, principal.user_id, sorted(updates))
        return self._require(current.employee_id)

    def delete(self, principal: Principal, employee_id: int) -> None:
        current = self._require(employee_id)
        ensure_allowed(decide(principal, RecordType.EMPLOYEE, Operation.DELETE, owner_id=current.employee_id))

        if not self._employees.delete_by_id(current.employee_id):
            raise NotFoundError("Employee not found")
        logger.info("employee %s deleted by user %s", current.employee_id, principal.user_id)

    def stats_overview(self, principal: Principal) -> dict:
        ensure_allowed(decide(principal, RecordType.EMPLOYEE, Operation.LIST))
        stats = self._employees.stats()
        return {
            "totalEmployees": stats.total_employees,
            "activeEmployees": stats.active_employees,
            "avgSalary": stats.avg_salary,
            "departmentStats": [{"department": name, "count": count} for name, count in stats.department_counts],
        }

