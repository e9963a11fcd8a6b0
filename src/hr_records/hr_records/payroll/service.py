from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional

from ..common.datetime_utils import month_range
from ..common.pagination import Page, PageRequest
from ..common.validators import FieldErrors
from ..core.enums import Operation, PayrollStatus, RecordType
from ..core.exceptions import NotFoundError
from ..core.patch import is_set
from ..core.principal import Principal
from ..employees.repository import EmployeeRepository
from ..policy.model import ensure_allowed
from ..policy.rules import decide
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollChanges, PayrollQuery, PayrollRecord
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

_SALARY_INPUTS = ("basic_salary", "allowances", "deductions")


class PayrollService:
    """Use cases: record salary payments and move them through payment status (admin)."""

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payroll = payroll
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()

    def _require(self, payroll_id: int) -> PayrollRecord:
        record = self._payroll.get_by_id(int(payroll_id))
        if not record:
            raise NotFoundError("Payroll record not found")
        return record

    def list(
        self,
        principal: Principal,
        *,
        page: PageRequest,
        search: str = "",
        status: str = "",
        month: str = "",
    ) -> Page[PayrollRecord]:
        ensure_allowed(decide(principal, RecordType.PAYROLL, Operation.LIST))

        errors = FieldErrors()
        status_filter = errors.choice(status, "status", PayrollStatus, required=False)
        window = (None, None)
        if month and month.strip():
            try:
                window = month_range(month)
            except ValueError:
                errors.add("month", "month must be YYYY-MM")
        errors.raise_if_any()

        items, total = self._payroll.list(
            PayrollQuery(
                search=(search or "").strip() or None,
                status=status_filter,
                pay_date_from=window[0],
                pay_date_to=window[1],
                offset=page.offset,
                limit=page.limit,
            )
        )
        return Page(items=items, total=total, page=page.page, limit=page.limit)

    def get(self, principal: Principal, payroll_id: int) -> PayrollRecord:
        record = self._require(payroll_id)
        ensure_allowed(decide(principal, RecordType.PAYROLL, Operation.READ, owner_id=record.employee_id))
        return record

    def create(self, principal: Principal, payload: Mapping[str, Any]) -> PayrollRecord:
        ensure_allowed(decide(principal, RecordType.PAYROLL, Operation.CREATE))

        errors = FieldErrors()
        employee_id = errors.identifier(payload.get("employeeId"), "employeeId", message="Employee ID is required")
        basic = errors.number(payload.get("basicSalary"), "basicSalary", message="Basic salary must be a positive number")
        allowances = errors.number(payload.get("allowances"), "allowances", required=False)
        deductions = errors.number(payload.get("deductions"), "deductions", required=False)
        pay_date = errors.date(payload.get("payDate"), "payDate", message="Pay date is required")
        status = errors.choice(payload.get("status"), "status", PayrollStatus, required=False)
        bank_account = errors.text(payload.get("bankAccount"), "bankAccount", required=False)
        errors.raise_if_any()

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        allowances = allowances or 0.0
        deductions = deductions or 0.0
        record = PayrollRecord(
            payroll_id=0,
            employee_id=employee.employee_id,
            employee_name=employee.full_name,
            department=employee.department,
            basic_salary=basic,
            allowances=allowances,
            deductions=deductions,
            net_salary=self._calculator.net_salary(basic, allowances, deductions),
            pay_date=pay_date,
            status=status or PayrollStatus.PENDING,
            bank_account=bank_account,
        )
        payroll_id = self._payroll.insert(record)
        logger.info("payroll %s created for employee %s by user %s", payroll_id, employee.employee_id, principal.user_id)
        return self._require(payroll_id)

    def update(self, principal: Principal, payroll_id: int, changes: PayrollChanges) -> PayrollRecord:
        current = self._require(payroll_id)
        ensure_allowed(decide(principal, RecordType.PAYROLL, Operation.UPDATE, owner_id=current.employee_id))

        errors = FieldErrors()
        updates: dict[str, Any] = {}
        if is_set(changes.basic_salary):
            updates["basic_salary"] = errors.number(
                changes.basic_salary, "basicSalary", message="Basic salary must be a positive number"
            )
        if is_set(changes.allowances):
            # null resets to the default of 0
            updates["allowances"] = errors.number(changes.allowances, "allowances", required=False) or 0.0
        if is_set(changes.deductions):
            updates["deductions"] = errors.number(changes.deductions, "deductions", required=False) or 0.0
        if is_set(changes.pay_date):
            updates["pay_date"] = errors.date(changes.pay_date, "payDate")
        if is_set(changes.status):
            updates["status"] = errors.choice(changes.status, "status", PayrollStatus)
        if is_set(changes.bank_account):
            updates["bank_account"] = errors.text(changes.bank_account, "bankAccount", required=False)
        errors.raise_if_any()

        if not updates:
            return current

        merged = replace(current, **updates)
        if any(name in updates for name in _SALARY_INPUTS):
            merged = replace(
                merged,
                net_salary=self._calculator.net_salary(merged.basic_salary, merged.allowances, merged.deductions),
            )

        self._payroll.update(merged)
        logger.info("payroll %s updated by user %s (%s)", current.payroll_id, principal.user_id, sorted(updates))
        return self._require(current.payroll_id)

    def transition_status(self, principal: Principal, payroll_id: int, new_status: Any) -> PayrollRecord:
        current = self._require(payroll_id)
        ensure_allowed(decide(principal, RecordType.PAYROLL, Operation.TRANSITION, owner_id=current.employee_id))

        errors = FieldErrors()
        status = errors.choice(new_status, "status", PayrollStatus, message="Valid status is required")
        errors.raise_if_any()

        if status == current.status:
            return current
        self._payroll.update(replace(current, status=status))
        logger.info(
            "payroll %s status %s -> %s by user %s",
            current.payroll_id,
            current.status.value,
            status.value,
            principal.user_id,
        )
        return self._require(current.payroll_id)

    def delete(self, principal: Principal, payroll_id: int) -> None:
        current = self._require(payroll_id)
        ensure_allowed(decide(principal, RecordType.PAYROLL, Operation.DELETE, owner_id=current.employee_id))

        if not self._payroll.delete_by_id(current.payroll_id):
            raise NotFoundError("Payroll record not found")
        logger.info("payroll %s deleted by user %s", current.payroll_id, principal.user_id)
