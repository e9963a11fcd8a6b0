from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping

from ..common.datetime_utils import today_local
from ..common.derived_fields import compute_days
from ..common.pagination import Page, PageRequest
from ..common.validators import FieldErrors
from ..core.enums import LeaveStatus, LeaveType, Operation, RecordType
from ..core.exceptions import NotFoundError
from ..core.patch import is_set
from ..core.principal import Principal
from ..employees.repository import EmployeeRepository
from ..policy.model import Allow, ensure_allowed
from ..policy.rules import decide
from .model import LeaveChanges, LeaveQuery, LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


def _requested_status(value: Any):
    """Status a payload asks for, as seen by the policy.

    Unknown strings are passed through unchanged; they never equal
    ``pending``, so an employee sending one is denied like any other
    non-pending value.
    """
    if not is_set(value) or value is None:
        return None
    try:
        return LeaveStatus(value)
    except ValueError:
        return value


class LeaveService:
    """Use cases: apply for leave, edit pending requests, approve/reject (admin)."""

    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository):
        self._leaves = leaves
        self._employees = employees

    def _require(self, leave_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(int(leave_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave

    def list(
        self,
        principal: Principal,
        *,
        page: PageRequest,
        search: str = "",
        status: str = "",
        leave_type: str = "",
    ) -> Page[LeaveRequest]:
        allow = ensure_allowed(decide(principal, RecordType.LEAVE, Operation.LIST))

        errors = FieldErrors()
        status_filter = errors.choice(status, "status", LeaveStatus, required=False)
        type_filter = errors.choice(leave_type, "type", LeaveType, required=False)
        errors.raise_if_any()

        scope = allow.scope
        if scope.matches_nothing:
            return Page.empty(page)

        items, total = self._leaves.list(
            LeaveQuery(
                employee_id=scope.owner_id if scope.restricted else None,
                search=((search or "").strip() or None) if scope.search_enabled else None,
                status=status_filter,
                leave_type=type_filter,
                offset=page.offset,
                limit=page.limit,
            )
        )
        return Page(items=items, total=total, page=page.page, limit=page.limit)

    def get(self, principal: Principal, leave_id: int) -> LeaveRequest:
        leave = self._require(leave_id)
        ensure_allowed(decide(principal, RecordType.LEAVE, Operation.READ, owner_id=leave.employee_id))
        return leave

    def create(self, principal: Principal, payload: Mapping[str, Any]) -> LeaveRequest:
        allow = ensure_allowed(decide(principal, RecordType.LEAVE, Operation.CREATE))

        errors = FieldErrors()
        if allow.scope.restricted:
            # Self-service: any employeeId in the payload is ignored.
            employee_id = allow.scope.owner_id
        else:
            employee_id = errors.identifier(payload.get("employeeId"), "employeeId", message="Employee ID is required")
        leave_type = errors.choice(payload.get("leaveType"), "leaveType", LeaveType, message="Valid leave type is required")
        start_date = errors.date(payload.get("startDate"), "startDate", message="Start date is required")
        end_date = errors.date(payload.get("endDate"), "endDate", message="End date is required")
        reason = errors.text(payload.get("reason"), "reason", message="Reason is required")
        if allow.forced_status is not None:
            status = allow.forced_status
        else:
            status = errors.choice(payload.get("status"), "status", LeaveStatus, required=False)
        errors.raise_if_any()

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        leave = LeaveRequest(
            leave_id=0,
            employee_id=employee.employee_id,
            employee_name=employee.full_name,
            department=employee.department,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days=compute_days(start_date, end_date),
            reason=reason,
            status=status or LeaveStatus.PENDING,
            applied_date=today_local(),
        )
        leave_id = self._leaves.insert(leave)
        logger.info("leave %s created for employee %s by user %s", leave_id, employee.employee_id, principal.user_id)
        return self._require(leave_id)

    def _apply(self, allow: Allow, changes: LeaveChanges) -> dict[str, Any]:
        """Validate the writable subset of ``changes``; fields the policy does not grant are dropped."""
        errors = FieldErrors()
        updates: dict[str, Any] = {}
        if is_set(changes.leave_type) and allow.can_write("leave_type"):
            updates["leave_type"] = errors.choice(changes.leave_type, "leaveType", LeaveType)
        if is_set(changes.start_date) and allow.can_write("start_date"):
            updates["start_date"] = errors.date(changes.start_date, "startDate")
        if is_set(changes.end_date) and allow.can_write("end_date"):
            updates["end_date"] = errors.date(changes.end_date, "endDate")
        if is_set(changes.reason) and allow.can_write("reason"):
            updates["reason"] = errors.text(changes.reason, "reason", message="Reason cannot be empty")
        if is_set(changes.status) and allow.can_write("status"):
            updates["status"] = errors.choice(changes.status, "status", LeaveStatus)
        errors.raise_if_any()
        return updates

    def _save(self, principal: Principal, current: LeaveRequest, updates: dict[str, Any]) -> LeaveRequest:
        if not updates:
            return current

        merged = replace(current, **updates)
        if "start_date" in updates or "end_date" in updates:
            merged = replace(merged, days=compute_days(merged.start_date, merged.end_date))

        self._leaves.update(merged)
        logger.info("leave %s updated by user %s (%s)", current.leave_id, principal.user_id, sorted(updates))
        return self._require(current.leave_id)

    def update(self, principal: Principal, leave_id: int, changes: LeaveChanges) -> LeaveRequest:
        current = self._require(leave_id)
        allow = ensure_allowed(
            decide(
                principal,
                RecordType.LEAVE,
                Operation.UPDATE,
                owner_id=current.employee_id,
                current_status=current.status,
                requested_status=_requested_status(changes.status),
            )
        )
        return self._save(principal, current, self._apply(allow, changes))

    def transition_status(self, principal: Principal, leave_id: int, new_status: Any) -> LeaveRequest:
        current = self._require(leave_id)
        allow = ensure_allowed(
            decide(
                principal,
                RecordType.LEAVE,
                Operation.TRANSITION,
                owner_id=current.employee_id,
                current_status=current.status,
                requested_status=_requested_status(new_status),
            )
        )

        errors = FieldErrors()
        status = errors.choice(new_status, "status", LeaveStatus, message="Valid status is required")
        errors.raise_if_any()

        if not allow.can_write("status") or status == current.status:
            return current
        self._leaves.update(replace(current, status=status))
        logger.info(
            "leave %s status %s -> %s by user %s",
            current.leave_id,
            current.status.value,
            status.value,
            principal.user_id,
        )
        return self._require(current.leave_id)

    def delete(self, principal: Principal, leave_id: int) -> None:
        current = self._require(leave_id)
        ensure_allowed(
            decide(
                principal,
                RecordType.LEAVE,
                Operation.DELETE,
                owner_id=current.employee_id,
                current_status=current.status,
            )
        )

        if not self._leaves.delete_by_id(current.leave_id):
            raise NotFoundError("Leave request not found")
        logger.info("leave %s deleted by user %s", current.leave_id, principal.user_id)
