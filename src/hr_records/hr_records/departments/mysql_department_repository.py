from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import DepartmentStatus
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
from .model import DUPLICATE_NAME, Department, DepartmentQuery
from .repository import DepartmentRepository

_COLUMNS = """
    department_id, name, description, manager_id, budget, location,
    established_date, status, created_at, updated_at
"""


def build_department_filters(query: DepartmentQuery) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if query.search:
        clauses.append("(name LIKE %s OR location LIKE %s)")
        params.extend([like_pattern(query.search)] * 2)
    if query.status is not None:
        clauses.append("status=%s")
        params.append(query.status.value)
    return clauses, params


def _row_to_department(r: dict) -> Department:
    manager_id = r.get("manager_id")
    return Department(
        department_id=int(r["department_id"]),
        name=r["name"],
        description=r.get("description"),
        manager_id=int(manager_id) if manager_id is not None else None,
        budget=to_float(r.get("budget")),
        location=r.get("location"),
        established_date=r["established_date"],
        status=DepartmentStatus(r["status"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments WHERE department_id=%s", (int(department_id),))
            r = fetchone(cur)
            return _row_to_department(r) if r else None

    def get_by_name(self, name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM departments WHERE name=%s", (name,))
            r = fetchone(cur)
            return _row_to_department(r) if r else None

    def list(self, query: DepartmentQuery) -> tuple[Sequence[Department], int]:
        clauses, params = build_department_filters(query)
        where = where_clause(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM departments {where}", tuple(params))
            total = int(fetchone(cur)["total"])
            cur.execute(
                f"SELECT {_COLUMNS} FROM departments {where} ORDER BY name ASC LIMIT %s OFFSET %s",
                tuple(params) + (int(query.limit), int(query.offset)),
            )
            return [_row_to_department(r) for r in fetchall(cur)], total

    def insert(self, department: Department) -> int:
        with unique_violation_as_conflict(DUPLICATE_NAME):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO departments(
                        name, description, manager_id, budget, location, established_date, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        department.name,
                        department.description,
                        department.manager_id,
                        department.budget,
                        department.location,
                        department.established_date,
                        department.status.value,
                    ),
                )
                return int(cur.lastrowid)

    def update(self, department: Department) -> None:
        with unique_violation_as_conflict(DUPLICATE_NAME):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE departments
                    SET name=%s, description=%s, manager_id=%s, budget=%s, location=%s,
                        established_date=%s, status=%s
                    WHERE department_id=%s
                    """,
                    (
                        department.name,
                        department.description,
                        department.manager_id,
                        department.budget,
                        department.location,
                        department.established_date,
                        department.status.value,
                        int(department.department_id),
                    ),
                )

    def delete_by_id(self, department_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM departments WHERE department_id=%s", (int(department_id),))
            return cur.rowcount > 0
