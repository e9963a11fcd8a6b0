from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    like_pattern,
    to_float,
    unique_violation_as_conflict,
    where_clause,
)
from .model import DUPLICATE_EMAIL, Employee, EmployeeQuery, EmployeeStats
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, first_name, last_name, email, phone, position, department,
    salary, hire_date, status, notes, created_at, updated_at
"""


def build_employee_filters(query: EmployeeQuery) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []

    if query.search:
        pattern = like_pattern(query.search)
        clauses.append("(first_name LIKE %s OR last_name LIKE %s OR email LIKE %s OR position LIKE %s)")
        params.extend([pattern] * 4)
    if query.department:
        clauses.append("department=%s")
        params.append(query.department)
    if query.status is not None:
        clauses.append("status=%s")
        params.append(query.status.value)
    return clauses, params


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r["email"],
        phone=r["phone"],
        position=r.get("position"),
        department=r["department"],
        salary=to_float(r["salary"]) or 0.0,
        hire_date=r["hire_date"],
        status=EmployeeStatus(r["status"]),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def list(self, query: EmployeeQuery) -> tuple[Sequence[Employee], int]:
        clauses, params = build_employee_filters(query)
        where = where_clause(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM employees {where}", tuple(params))
            total = int(fetchone(cur)["total"])

            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                {where}
                ORDER BY created_at DESC, employee_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(query.limit), int(query.offset)),
            )
            return [_row_to_employee(r) for r in fetchall(cur)], total

    def list_by_department(self, department_name: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE department=%s ORDER BY first_name ASC",
                (department_name,),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def count_by_department(self, department_name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM employees WHERE department=%s", (department_name,))
            return int(fetchone(cur)["total"])

    def insert(self, employee: Employee) -> int:
        with unique_violation_as_conflict(DUPLICATE_EMAIL):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(
                        first_name, last_name, email, phone, position, department,
                        salary, hire_date, status, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        employee.first_name,
                        employee.last_name,
                        employee.email,
                        employee.phone,
                        employee.position,
                        employee.department,
                        employee.salary,
                        employee.hire_date,
                        employee.status.value,
                        employee.notes,
                    ),
                )
                return int(cur.lastrowid)

    def update(self, employee: Employee) -> None:
        with unique_violation_as_conflict(DUPLICATE_EMAIL):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE employees
                    SET first_name=%s, last_name=%s, email=%s, phone=%s, position=%s,
                        department=%s, salary=%s, hire_date=%s, status=%s, notes=%s
                    WHERE employee_id=%s
                    """,
                    (
                        employee.first_name,
                        employee.last_name,
                        employee.email,
                        employee.phone,
                        employee.position,
                        employee.department,
                        employee.salary,
                        employee.hire_date,
                        employee.status.value,
                        employee.notes,
                        int(employee.employee_id),
                    ),
                )

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0

    def stats(self) -> EmployeeStats:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS total,
                       COALESCE(SUM(status='active'), 0) AS active,
                       COALESCE(AVG(salary), 0) AS avg_salary
                FROM employees
                """
            )
            totals = fetchone(cur)
            cur.execute(
                """
                SELECT department, COUNT(*) AS total
                FROM employees
                GROUP BY department
                ORDER BY total DESC, department ASC
                """
            )
            counts = [(r["department"], int(r["total"])) for r in fetchall(cur)]

        return EmployeeStats(
            total_employees=int(totals["total"]),
            active_employees=int(totals["active"]),
            avg_salary=to_float(totals["avg_salary"]) or 0.0,
            department_counts=counts,
        )
