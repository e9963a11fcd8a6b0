"""Role-scoped authorization and visibility rules.

``decide`` is stateless: it never touches storage and never raises for
well-formed input. Callers pass the current owner/status of the target
record where one exists.
"""
from __future__ import annotations

from typing import Optional

from ..core.enums import LeaveStatus, Operation, RecordType
from ..core.principal import Principal
from .model import Allow, Decision, Deny, DenyReason, Scope

# Fields an employee may change on their own pending leave.
EMPLOYEE_LEAVE_FIELDS = frozenset({"leave_type", "start_date", "end_date", "reason"})

_NOUNS = {
    RecordType.EMPLOYEE: "employee record",
    RecordType.DEPARTMENT: "departments",
    RecordType.ATTENDANCE: "attendance",
    RecordType.LEAVE: "leaves",
    RecordType.PAYROLL: "payroll",
}

_VERBS = {
    Operation.LIST: "view",
    Operation.READ: "view",
    Operation.CREATE: "create",
    Operation.UPDATE: "update",
    Operation.DELETE: "delete",
    Operation.TRANSITION: "update",
}


def _forbidden_role(record_type: RecordType, operation: Operation) -> Deny:
    return Deny(
        DenyReason.FORBIDDEN_ROLE,
        f"Access denied. Only admins can {_VERBS[operation]} {_NOUNS[record_type]}.",
    )


def _not_owner(record_type: RecordType, operation: Operation) -> Deny:
    return Deny(
        DenyReason.NOT_OWNER,
        f"Access denied. You can only {_VERBS[operation]} your own {_NOUNS[record_type]}.",
    )


def _owns(principal: Principal, owner_id: Optional[int]) -> bool:
    return principal.employee_id is not None and owner_id is not None and int(owner_id) == int(principal.employee_id)


def _decide_own_records(principal: Principal, record_type: RecordType, operation: Operation, owner_id) -> Optional[Decision]:
    """List/read rules shared by Attendance and Leave."""
    if operation == Operation.LIST:
        return Allow(scope=Scope.owned_by(principal.employee_id))
    if operation == Operation.READ:
        if not _owns(principal, owner_id):
            return _not_owner(record_type, operation)
        return Allow(scope=Scope.owned_by(principal.employee_id))
    return None


def _decide_employee_leave(
    principal: Principal,
    operation: Operation,
    owner_id: Optional[int],
    current_status: Optional[LeaveStatus],
    requested_status: Optional[LeaveStatus],
) -> Decision:
    scope = Scope.owned_by(principal.employee_id)

    if operation == Operation.CREATE:
        if principal.employee_id is None:
            return Deny(
                DenyReason.FORBIDDEN_ROLE,
                "Access denied. Your account is not linked to an employee record.",
            )
        return Allow(scope=scope, writable_fields=EMPLOYEE_LEAVE_FIELDS, forced_status=LeaveStatus.PENDING)

    if not _owns(principal, owner_id):
        return _not_owner(RecordType.LEAVE, operation)

    if current_status != LeaveStatus.PENDING:
        return Deny(
            DenyReason.INVALID_STATUS_FOR_OPERATION,
            f"You can only {_VERBS[operation]} pending leave requests.",
        )

    if operation == Operation.DELETE:
        return Allow(scope=scope)

    if requested_status is not None and requested_status != LeaveStatus.PENDING:
        return Deny(
            DenyReason.INVALID_STATUS_FOR_OPERATION,
            "You cannot change leave status. Only admins can approve or reject leaves.",
        )
    return Allow(scope=scope, writable_fields=EMPLOYEE_LEAVE_FIELDS)


def decide(
    principal: Principal,
    record_type: RecordType,
    operation: Operation,
    *,
    owner_id: Optional[int] = None,
    current_status: Optional[LeaveStatus] = None,
    requested_status: Optional[LeaveStatus] = None,
) -> Decision:
    """Decide whether ``principal`` may perform ``operation`` on ``record_type``.

    ``owner_id`` is the employee id the target record belongs to (for an
    Employee record, its own id). ``current_status`` and
    ``requested_status`` only matter for Leave.
    """
    if principal.is_admin:
        return Allow()

    if record_type in (RecordType.ATTENDANCE, RecordType.LEAVE):
        decision = _decide_own_records(principal, record_type, operation, owner_id)
        if decision is not None:
            return decision

    if record_type == RecordType.LEAVE:
        return _decide_employee_leave(principal, operation, owner_id, current_status, requested_status)

    if record_type == RecordType.EMPLOYEE and operation == Operation.READ:
        if not _owns(principal, owner_id):
            return _not_owner(record_type, operation)
        return Allow(scope=Scope.owned_by(principal.employee_id))

    return _forbidden_role(record_type, operation)
