from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping

from ..common.derived_fields import compute_hours
from ..common.pagination import Page, PageRequest
from ..common.validators import FieldErrors
from ..core.enums import AttendanceStatus, Operation, RecordType
from ..core.exceptions import ConflictError, NotFoundError
from ..core.patch import is_set
from ..core.principal import Principal
from ..employees.repository import EmployeeRepository
from ..policy.model import ensure_allowed
from ..policy.rules import decide
from .model import DUPLICATE_ATTENDANCE, AttendanceChanges, AttendanceQuery, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases: record daily attendance (admin) and view it (admin or owner)."""

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def _require(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def list(
        self,
        principal: Principal,
        *,
        page: PageRequest,
        search: str = "",
        status: str = "",
        work_date: str = "",
    ) -> Page[AttendanceRecord]:
        allow = ensure_allowed(decide(principal, RecordType.ATTENDANCE, Operation.LIST))

        errors = FieldErrors()
        status_filter = errors.choice(status, "status", AttendanceStatus, required=False)
        date_filter = errors.date(work_date, "date", required=False)
        errors.raise_if_any()

        scope = allow.scope
        if scope.matches_nothing:
            return Page.empty(page)

        # Employees only ever see their own rows; a search term from them is dropped.
        items, total = self._attendance.list(
            AttendanceQuery(
                employee_id=scope.owner_id if scope.restricted else None,
                search=((search or "").strip() or None) if scope.search_enabled else None,
                status=status_filter,
                work_date=date_filter,
                offset=page.offset,
                limit=page.limit,
            )
        )
        return Page(items=items, total=total, page=page.page, limit=page.limit)

    def get(self, principal: Principal, attendance_id: int) -> AttendanceRecord:
        record = self._require(attendance_id)
        ensure_allowed(decide(principal, RecordType.ATTENDANCE, Operation.READ, owner_id=record.employee_id))
        return record

    def create(self, principal: Principal, payload: Mapping[str, Any]) -> AttendanceRecord:
        ensure_allowed(decide(principal, RecordType.ATTENDANCE, Operation.CREATE))

        errors = FieldErrors()
        employee_id = errors.identifier(payload.get("employeeId"), "employeeId", message="Employee ID is required")
        work_date = errors.date(payload.get("date"), "date", message="Date is required")
        check_in = errors.time_of_day(payload.get("checkIn"), "checkIn")
        check_out = errors.time_of_day(payload.get("checkOut"), "checkOut")
        status = errors.choice(payload.get("status"), "status", AttendanceStatus, required=False)
        notes = errors.text(payload.get("notes"), "notes", required=False)
        errors.raise_if_any()

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        if self._attendance.get_for_employee_and_date(employee.employee_id, work_date):
            raise ConflictError(DUPLICATE_ATTENDANCE)

        record = AttendanceRecord(
            attendance_id=0,
            employee_id=employee.employee_id,
            employee_name=employee.full_name,
            department=employee.department,
            work_date=work_date,
            check_in=check_in,
            check_out=check_out,
            hours=compute_hours(check_in, check_out),
            status=status or AttendanceStatus.PRESENT,
            notes=notes,
        )
        # A concurrent create can pass the pre-check; the unique key reports it as ConflictError.
        attendance_id = self._attendance.insert(record)
        logger.info(
            "attendance %s created for employee %s on %s by user %s",
            attendance_id,
            employee.employee_id,
            work_date.isoformat(),
            principal.user_id,
        )
        return self._require(attendance_id)

    def update(self, principal: Principal, attendance_id: int, changes: AttendanceChanges) -> AttendanceRecord:
        current = self._require(attendance_id)
        ensure_allowed(decide(principal, RecordType.ATTENDANCE, Operation.UPDATE, owner_id=current.employee_id))

        errors = FieldErrors()
        updates: dict[str, Any] = {}
        if is_set(changes.work_date):
            updates["work_date"] = errors.date(changes.work_date, "date")
        if is_set(changes.check_in):
            updates["check_in"] = errors.time_of_day(changes.check_in, "checkIn")
        if is_set(changes.check_out):
            updates["check_out"] = errors.time_of_day(changes.check_out, "checkOut")
        if is_set(changes.status):
            updates["status"] = errors.choice(changes.status, "status", AttendanceStatus)
        if is_set(changes.notes):
            updates["notes"] = errors.text(changes.notes, "notes", required=False)
        errors.raise_if_any()

        new_date = updates.get("work_date")
        if new_date and new_date != current.work_date:
            other = self._attendance.get_for_employee_and_date(current.employee_id, new_date)
            if other and other.attendance_id != current.attendance_id:
                raise ConflictError(DUPLICATE_ATTENDANCE)

        if not updates:
            return current

        merged = replace(current, **updates)
        if "check_in" in updates or "check_out" in updates:
            merged = replace(merged, hours=compute_hours(merged.check_in, merged.check_out))

        self._attendance.update(merged)
        logger.info("attendance %s updated by user %s (%s)", current.attendance_id, principal.user_id, sorted(updates))
        return self._require(current.attendance_id)

    def delete(self, principal: Principal, attendance_id: int) -> None:
        current = self._require(attendance_id)
        ensure_allowed(decide(principal, RecordType.ATTENDANCE, Operation.DELETE, owner_id=current.employee_id))

        if not self._attendance.delete_by_id(current.attendance_id):
            raise NotFoundError("Attendance record not found")
        logger.info("attendance %s deleted by user %s", current.attendance_id, principal.user_id)
