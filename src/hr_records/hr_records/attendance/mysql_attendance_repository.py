from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
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
from .model import DUPLICATE_ATTENDANCE, AttendanceQuery, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, employee_name, department, work_date,
    check_in, check_out, hours, status, notes, created_at, updated_at
"""

ORDER_BY = "ORDER BY work_date DESC, created_at DESC, attendance_id DESC"


def build_attendance_filters(query: AttendanceQuery) -> tuple[list[str], list[object]]:
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
    if query.work_date is not None:
        clauses.append("work_date=%s")
        params.append(query.work_date)
    return clauses, params


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        employee_name=r["employee_name"],
        department=r.get("department"),
        work_date=r["work_date"],
        check_in=r.get("check_in"),
        check_out=r.get("check_out"),
        hours=to_float(r.get("hours")) or 0.0,
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list(self, query: AttendanceQuery) -> tuple[Sequence[AttendanceRecord], int]:
        clauses, params = build_attendance_filters(query)
        where = where_clause(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM attendance_records {where}", tuple(params))
            total = int(fetchone(cur)["total"])
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records {where} {ORDER_BY} LIMIT %s OFFSET %s",
                tuple(params) + (int(query.limit), int(query.offset)),
            )
            return [_row_to_record(r) for r in fetchall(cur)], total

    def insert(self, record: AttendanceRecord) -> int:
        with unique_violation_as_conflict(DUPLICATE_ATTENDANCE):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, employee_name, department, work_date,
                        check_in, check_out, hours, status, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(record.employee_id),
                        record.employee_name,
                        record.department,
                        record.work_date,
                        record.check_in,
                        record.check_out,
                        record.hours,
                        record.status.value,
                        record.notes,
                    ),
                )
                return int(cur.lastrowid)

    def update(self, record: AttendanceRecord) -> None:
        with unique_violation_as_conflict(DUPLICATE_ATTENDANCE):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE attendance_records
                    SET work_date=%s, check_in=%s, check_out=%s, hours=%s, status=%s, notes=%s
                    WHERE attendance_id=%s
                    """,
                    (
                        record.work_date,
                        record.check_in,
                        record.check_out,
                        record.hours,
                        record.status.value,
                        record.notes,
                        int(record.attendance_id),
                    ),
                )

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0
