import pytest

from src.hr_records.hr_records.core.enums import LeaveStatus, Operation, RecordType, Role
from src.hr_records.hr_records.core.exceptions import AuthorizationError
from src.hr_records.hr_records.core.principal import Principal
from src.hr_records.hr_records.policy.model import Allow, Deny, DenyReason, Scope, ensure_allowed
from src.hr_records.hr_records.policy.rules import EMPLOYEE_LEAVE_FIELDS, decide

ADMIN = Principal(user_id=1, role=Role.ADMIN)
E1 = Principal(user_id=2, role=Role.EMPLOYEE, employee_id=10)
UNLINKED = Principal(user_id=3, role=Role.EMPLOYEE)


@pytest.mark.parametrize("record_type", list(RecordType))
@pytest.mark.parametrize("operation", list(Operation))
def test_admin_is_always_allowed_unrestricted(record_type, operation):
    decision = decide(
        ADMIN,
        record_type,
        operation,
        owner_id=99,
        current_status=LeaveStatus.APPROVED,
        requested_status=LeaveStatus.REJECTED,
    )
    assert isinstance(decision, Allow)
    assert decision.scope == Scope.unrestricted()
    assert decision.writable_fields is None
    assert decision.forced_status is None


@pytest.mark.parametrize("record_type", [RecordType.ATTENDANCE, RecordType.LEAVE])
def test_employee_list_is_scoped_to_self_without_search(record_type):
    decision = decide(E1, record_type, Operation.LIST)
    assert isinstance(decision, Allow)
    assert decision.scope.restricted
    assert decision.scope.owner_id == 10
    assert not decision.scope.search_enabled


def test_unlinked_employee_list_matches_nothing():
    decision = decide(UNLINKED, RecordType.ATTENDANCE, Operation.LIST)
    assert isinstance(decision, Allow)
    assert decision.scope.matches_nothing


@pytest.mark.parametrize("record_type", [RecordType.ATTENDANCE, RecordType.LEAVE, RecordType.EMPLOYEE])
def test_employee_reads_only_own_records(record_type):
    assert isinstance(decide(E1, record_type, Operation.READ, owner_id=10), Allow)

    denied = decide(E1, record_type, Operation.READ, owner_id=11)
    assert isinstance(denied, Deny)
    assert denied.reason == DenyReason.NOT_OWNER


@pytest.mark.parametrize(
    "operation",
    [Operation.CREATE, Operation.UPDATE, Operation.DELETE, Operation.TRANSITION],
)
def test_employee_cannot_mutate_attendance_even_own(operation):
    decision = decide(E1, RecordType.ATTENDANCE, operation, owner_id=10)
    assert isinstance(decision, Deny)
    assert decision.reason == DenyReason.FORBIDDEN_ROLE


@pytest.mark.parametrize("record_type", [RecordType.PAYROLL, RecordType.DEPARTMENT])
@pytest.mark.parametrize("operation", list(Operation))
def test_payroll_and_departments_are_admin_only(record_type, operation):
    decision = decide(E1, record_type, operation, owner_id=10)
    assert isinstance(decision, Deny)
    assert decision.reason == DenyReason.FORBIDDEN_ROLE


@pytest.mark.parametrize("operation", [Operation.LIST, Operation.CREATE, Operation.UPDATE, Operation.DELETE])
def test_employee_records_are_admin_managed(operation):
    decision = decide(E1, RecordType.EMPLOYEE, operation, owner_id=10)
    assert isinstance(decision, Deny)
    assert decision.reason == DenyReason.FORBIDDEN_ROLE


def test_employee_leave_create_forces_self_and_pending():
    decision = decide(E1, RecordType.LEAVE, Operation.CREATE)
    assert isinstance(decision, Allow)
    assert decision.scope.owner_id == 10
    assert decision.forced_status == LeaveStatus.PENDING
    assert decision.writable_fields == EMPLOYEE_LEAVE_FIELDS


def test_unlinked_employee_cannot_create_leave():
    decision = decide(UNLINKED, RecordType.LEAVE, Operation.CREATE)
    assert isinstance(decision, Deny)
    assert decision.reason == DenyReason.FORBIDDEN_ROLE


@pytest.mark.parametrize("status", list(LeaveStatus))
@pytest.mark.parametrize("operation", [Operation.UPDATE, Operation.DELETE, Operation.TRANSITION])
def test_other_employees_leave_is_not_owner_regardless_of_status(status, operation):
    decision = decide(E1, RecordType.LEAVE, operation, owner_id=11, current_status=status)
    assert isinstance(decision, Deny)
    assert decision.reason == DenyReason.NOT_OWNER


@pytest.mark.parametrize("status", [LeaveStatus.PROCESSING, LeaveStatus.APPROVED, LeaveStatus.REJECTED])
@pytest.mark.parametrize("operation", [Operation.UPDATE, Operation.DELETE])
def test_own_leave_is_locked_once_not_pending(status, operation):
    decision = decide(E1, RecordType.LEAVE, operation, owner_id=10, current_status=status)
    assert isinstance(decision, Deny)
    assert decision.reason == DenyReason.INVALID_STATUS_FOR_OPERATION


def test_own_pending_leave_update_limits_fields():
    decision = decide(E1, RecordType.LEAVE, Operation.UPDATE, owner_id=10, current_status=LeaveStatus.PENDING)
    assert isinstance(decision, Allow)
    assert decision.can_write("reason")
    assert decision.can_write("start_date")
    assert not decision.can_write("status")


@pytest.mark.parametrize("requested", [LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.PROCESSING, "bogus"])
def test_employee_cannot_request_non_pending_status(requested):
    decision = decide(
        E1,
        RecordType.LEAVE,
        Operation.UPDATE,
        owner_id=10,
        current_status=LeaveStatus.PENDING,
        requested_status=requested,
    )
    assert isinstance(decision, Deny)
    assert decision.reason == DenyReason.INVALID_STATUS_FOR_OPERATION


def test_employee_requesting_pending_is_allowed():
    decision = decide(
        E1,
        RecordType.LEAVE,
        Operation.UPDATE,
        owner_id=10,
        current_status=LeaveStatus.PENDING,
        requested_status=LeaveStatus.PENDING,
    )
    assert isinstance(decision, Allow)


def test_ensure_allowed_raises_with_reason():
    with pytest.raises(AuthorizationError) as exc:
        ensure_allowed(decide(E1, RecordType.PAYROLL, Operation.LIST))
    assert exc.value.reason == "forbidden-role"
    assert "Only admins" in str(exc.value)
