from __future__ import annotations

from ...common.derived_fields import compute_net_salary
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: basic + allowances - deductions, no floor at 0."""

    def net_salary(self, basic_salary: float, allowances: float, deductions: float) -> float:
        return compute_net_salary(basic_salary, allowances or 0, deductions or 0)
