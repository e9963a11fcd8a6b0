from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.hr_records.hr_records.core.enums import Role  # noqa: E402
from src.hr_records.hr_records.core.principal import Principal  # noqa: E402
from tests.fakes import (  # noqa: E402
    InMemoryAttendanceRepository,
    InMemoryDepartmentRepository,
    InMemoryEmployeeRepository,
    InMemoryLeaveRepository,
    InMemoryPayrollRepository,
    InMemoryUserRepository,
    make_employee,
)


@pytest.fixture
def employees():
    return InMemoryEmployeeRepository()


@pytest.fixture
def departments():
    return InMemoryDepartmentRepository()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendanceRepository()


@pytest.fixture
def leaves_repo():
    return InMemoryLeaveRepository()


@pytest.fixture
def payroll_repo():
    return InMemoryPayrollRepository()


@pytest.fixture
def users_repo():
    return InMemoryUserRepository()


@pytest.fixture
def asha(employees):
    return employees.get_by_id(employees.insert(make_employee()))


@pytest.fixture
def ravi(employees):
    return employees.get_by_id(
        employees.insert(make_employee("Ravi", "Kumar", "ravi.kumar@example.com", department="ECE", salary=42000.0))
    )


@pytest.fixture
def admin():
    return Principal(user_id=1, role=Role.ADMIN)


@pytest.fixture
def asha_principal(asha):
    return Principal(user_id=2, role=Role.EMPLOYEE, employee_id=asha.employee_id)


@pytest.fixture
def ravi_principal(ravi):
    return Principal(user_id=3, role=Role.EMPLOYEE, employee_id=ravi.employee_id)


@pytest.fixture
def unlinked_principal():
    return Principal(user_id=4, role=Role.EMPLOYEE, employee_id=None)
