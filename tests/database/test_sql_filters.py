from datetime import date

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.hr_records.hr_records.attendance.model import AttendanceQuery
from src.hr_records.hr_records.attendance.mysql_attendance_repository import build_attendance_filters
from src.hr_records.hr_records.core.enums import (
    AttendanceStatus,
    DepartmentStatus,
    EmployeeStatus,
    LeaveStatus,
    LeaveType,
    PayrollStatus,
)
from src.hr_records.hr_records.core.exceptions import ConflictError
from src.hr_records.hr_records.database.mysql_base import like_pattern, unique_violation_as_conflict, where_clause
from src.hr_records.hr_records.departments.model import DepartmentQuery
from src.hr_records.hr_records.departments.mysql_department_repository import build_department_filters
from src.hr_records.hr_records.employees.model import EmployeeQuery
from src.hr_records.hr_records.employees.mysql_employee_repository import build_employee_filters
from src.hr_records.hr_records.leaves.model import LeaveQuery
from src.hr_records.hr_records.leaves.mysql_leave_repository import build_leave_filters
from src.hr_records.hr_records.payroll.model import PayrollQuery
from src.hr_records.hr_records.payroll.mysql_payroll_repository import build_payroll_filters


def test_like_pattern_escapes_wildcards():
    assert like_pattern("rao") == "%rao%"
    assert like_pattern("50%_off") == "%50\\%\\_off%"
    assert like_pattern("a\\b") == "%a\\\\b%"


def test_where_clause():
    assert where_clause([]) == ""
    assert where_clause(["a=%s", "b=%s"]) == "WHERE a=%s AND b=%s"


def test_empty_queries_have_no_filters():
    for build, query in [
        (build_employee_filters, EmployeeQuery()),
        (build_department_filters, DepartmentQuery()),
        (build_attendance_filters, AttendanceQuery()),
        (build_leave_filters, LeaveQuery()),
        (build_payroll_filters, PayrollQuery()),
    ]:
        assert build(query) == ([], [])


def test_employee_filters():
    clauses, params = build_employee_filters(
        EmployeeQuery(search="rao", department="CSE", status=EmployeeStatus.ACTIVE)
    )

    assert clauses == [
        "(first_name LIKE %s OR last_name LIKE %s OR email LIKE %s OR position LIKE %s)",
        "department=%s",
        "status=%s",
    ]
    assert params == ["%rao%"] * 4 + ["CSE", "active"]


def test_department_filters():
    clauses, params = build_department_filters(DepartmentQuery(search="blk", status=DepartmentStatus.INACTIVE))

    assert clauses == ["(name LIKE %s OR location LIKE %s)", "status=%s"]
    assert params == ["%blk%", "%blk%", "inactive"]


def test_attendance_filters_scope_to_owner():
    clauses, params = build_attendance_filters(
        AttendanceQuery(employee_id=7, status=AttendanceStatus.HALF_DAY, work_date=date(2024, 3, 4))
    )

    assert clauses == ["employee_id=%s", "status=%s", "work_date=%s"]
    assert params == [7, "halfDay", date(2024, 3, 4)]


def test_leave_filters():
    clauses, params = build_leave_filters(
        LeaveQuery(search="cse", status=LeaveStatus.PENDING, leave_type=LeaveType.SICK)
    )

    assert clauses == ["(employee_name LIKE %s OR department LIKE %s)", "status=%s", "leave_type=%s"]
    assert params == ["%cse%", "%cse%", "pending", "Sick Leave"]


def test_payroll_month_window_is_half_open():
    clauses, params = build_payroll_filters(
        PayrollQuery(status=PayrollStatus.PAID, pay_date_from=date(2024, 3, 1), pay_date_to=date(2024, 4, 1))
    )

    assert clauses == ["status=%s", "pay_date >= %s", "pay_date < %s"]
    assert params == ["paid", date(2024, 3, 1), date(2024, 4, 1)]


def test_duplicate_key_becomes_conflict():
    with pytest.raises(ConflictError) as exc:
        with unique_violation_as_conflict("Already exists"):
            raise mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    assert str(exc.value) == "Already exists"


def test_other_integrity_errors_propagate():
    with pytest.raises(mysql.connector.IntegrityError):
        with unique_violation_as_conflict("Already exists"):
            raise mysql.connector.IntegrityError(msg="Cannot be null", errno=errorcode.ER_BAD_NULL_ERROR)
