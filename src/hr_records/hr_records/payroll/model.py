from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import PayrollStatus
from ..core.patch import UNSET, Changes


@dataclass(frozen=True)
class PayrollRecord:
    """A single salary payment. ``net_salary`` is derived."""

    payroll_id: int
    employee_id: int
    employee_name: str
    department: Optional[str]
    basic_salary: float
    pay_date: date
    allowances: float = 0.0
    deductions: float = 0.0
    net_salary: float = 0.0
    status: PayrollStatus = PayrollStatus.PENDING
    bank_account: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollChanges(Changes):
    payload_keys = {
        "basic_salary": "basicSalary",
        "pay_date": "payDate",
        "bank_account": "bankAccount",
    }

    basic_salary: Any = UNSET
    allowances: Any = UNSET
    deductions: Any = UNSET
    pay_date: Any = UNSET
    status: Any = UNSET
    bank_account: Any = UNSET


@dataclass(frozen=True)
class PayrollQuery:
    search: Optional[str] = None
    status: Optional[PayrollStatus] = None
    # Half-open pay-date window [pay_date_from, pay_date_to).
    pay_date_from: Optional[date] = None
    pay_date_to: Optional[date] = None
    offset: int = 0
    limit: int = 10
