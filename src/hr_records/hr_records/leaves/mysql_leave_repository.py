from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_pattern, where_clause
from .model import LeaveQuery, LeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    leave_id, employee_id, employee_name, department, leave_type, start_date,
    end_date, days, reason, status, applied_date, created_at, updated_at
"""

ORDER_BY = "ORDER BY start_date DESC, created_at DESC, leave_id DESC"


def build_leave_filters(query: LeaveQuery) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if query.employee_id is not None:
        clauses.append("employee_id=%s")
        params.append(int(query.employee_id))
    if query.search:
        clauses.append("(employee_name LIKE %s OR department LIKE %s)")
        params.extend([like_pattern(query.search)] * 2)
    if query.status is not None:
        clauses.append("status=%s")
        params.append(query.status.value)
    if query.leave_type is not None:
        clauses.append("leave_type=%s")
        params.append(query.leave_type.value)
    return clauses, params


def _row_to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        employee_name=r["employee_name"],
        department=r.get("department"),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=int(r["days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        applied_date=r["applied_date"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def list(self, query: LeaveQuery) -> tuple[Sequence[LeaveRequest], int]:
        clauses, params = build_leave_filters(query)
        where = where_clause(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM leave_requests {where}", tuple(params))
            total = int(fetchone(cur)["total"])
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests {where} {ORDER_BY} LIMIT %s OFFSET %s",
                tuple(params) + (int(query.limit), int(query.offset)),
            )
            return [_row_to_leave(r) for r in fetchall(cur)], total

    def insert(self, leave: LeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, employee_name, department, leave_type, start_date,
                    end_date, days, reason, status, applied_date
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(leave.employee_id),
                    leave.employee_name,
                    leave.department,
                    leave.leave_type.value,
                    leave.start_date,
                    leave.end_date,
                    int(leave.days),
                    leave.reason,
                    leave.status.value,
                    leave.applied_date,
                ),
            )
            return int(cur.lastrowid)

    def update(self, leave: LeaveRequest) -> None:
        # applied_date is never rewritten.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET leave_type=%s, start_date=%s, end_date=%s, days=%s, reason=%s, status=%s
                WHERE leave_id=%s
                """,
                (
                    leave.leave_type.value,
                    leave.start_date,
                    leave.end_date,
                    int(leave.days),
                    leave.reason,
                    leave.status.value,
                    int(leave.leave_id),
                ),
            )

    def delete_by_id(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            return cur.rowcount > 0
