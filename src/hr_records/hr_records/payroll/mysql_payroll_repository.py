from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_pattern, to_float, where_clause
from .model import PayrollQuery, PayrollRecord
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, employee_id, employee_name, department, basic_salary, allowances,
    deductions, net_salary, pay_date, status, bank_account, created_at, updated_at
"""

ORDER_BY = "ORDER BY pay_date DESC, created_at DESC, payroll_id DESC"


def build_payroll_filters(query: PayrollQuery) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if query.search:
        clauses.append("(employee_name LIKE %s OR department LIKE %s)")
        params.extend([like_pattern(query.search)] * 2)
    if query.status is not None:
        clauses.append("status=%s")
        params.append(query.status.value)
    if query.pay_date_from is not None:
        clauses.append("pay_date >= %s")
        params.append(query.pay_date_from)
    if query.pay_date_to is not None:
        clauses.append("pay_date < %s")
        params.append(query.pay_date_to)
    return clauses, params


def _row_to_payroll(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        employee_name=r["employee_name"],
        department=r.get("department"),
        basic_salary=to_float(r["basic_salary"]) or 0.0,
        allowances=to_float(r.get("allowances")) or 0.0,
        deductions=to_float(r.get("deductions")) or 0.0,
        net_salary=to_float(r.get("net_salary")) or 0.0,
        pay_date=r["pay_date"],
        status=PayrollStatus(r["status"]),
        bank_account=r.get("bank_account"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _row_to_payroll(r) if r else None

    def list(self, query: PayrollQuery) -> tuple[Sequence[PayrollRecord], int]:
        clauses, params = build_payroll_filters(query)
        where = where_clause(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM payroll_records {where}", tuple(params))
            total = int(fetchone(cur)["total"])
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_records {where} {ORDER_BY} LIMIT %s OFFSET %s",
                tuple(params) + (int(query.limit), int(query.offset)),
            )
            return [_row_to_payroll(r) for r in fetchall(cur)], total

    def insert(self, record: PayrollRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_records(
                    employee_id, employee_name, department, basic_salary, allowances,
                    deductions, net_salary, pay_date, status, bank_account
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(record.employee_id),
                    record.employee_name,
                    record.department,
                    record.basic_salary,
                    record.allowances,
                    record.deductions,
                    record.net_salary,
                    record.pay_date,
                    record.status.value,
                    record.bank_account,
                ),
            )
            return int(cur.lastrowid)

    def update(self, record: PayrollRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET basic_salary=%s, allowances=%s, deductions=%s, net_salary=%s,
                    pay_date=%s, status=%s, bank_account=%s
                WHERE payroll_id=%s
                """,
                (
                    record.basic_salary,
                    record.allowances,
                    record.deductions,
                    record.net_salary,
                    record.pay_date,
                    record.status.value,
                    record.bank_account,
                    int(record.payroll_id),
                ),
            )

    def delete_by_id(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_records WHERE payroll_id=%s", (int(payroll_id),))
            return cur.rowcount > 0
