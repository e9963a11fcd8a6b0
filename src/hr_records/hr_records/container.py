from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_TOKEN_MAX_AGE_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.repository import DepartmentRepository
from .departments.service import DepartmentService
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .payroll.calculator.base import PayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    employees_repo: EmployeeRepository
    departments_repo: DepartmentRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    payroll_repo: PayrollRepository

    auth_service: AuthService
    employee_service: EmployeeService
    department_service: DepartmentService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService


def assemble(
    *,
    users_repo: UserRepository,
    employees_repo: EmployeeRepository,
    departments_repo: DepartmentRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    payroll_repo: PayrollRepository,
    secret_key: str,
    token_max_age_days: int = DEFAULT_TOKEN_MAX_AGE_DAYS,
    allow_admin_signup: bool = False,
    payroll_calculator: Optional[PayrollCalculator] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""
    return Container(
        conn=conn,
        users_repo=users_repo,
        employees_repo=employees_repo,
        departments_repo=departments_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
        auth_service=AuthService(
            users_repo,
            employees_repo,
            secret_key=secret_key,
            token_max_age_days=token_max_age_days,
            allow_admin_signup=allow_admin_signup,
        ),
        employee_service=EmployeeService(employees_repo),
        department_service=DepartmentService(departments_repo, employees_repo),
        attendance_service=AttendanceService(attendance_repo, employees_repo),
        leave_service=LeaveService(leaves_repo, employees_repo),
        payroll_service=PayrollService(payroll_repo, employees_repo, calculator=payroll_calculator),
    )


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    token_max_age_days: int = DEFAULT_TOKEN_MAX_AGE_DAYS,
    allow_admin_signup: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        secret_key=secret_key,
        token_max_age_days=token_max_age_days,
        allow_admin_signup=allow_admin_signup,
    )
