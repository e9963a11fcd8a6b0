"""Derived fields: attendance hours, leave days and net salary.

Pure functions. Callers recompute from the merged record state whenever one
of the inputs is written.
"""
from __future__ import annotations

from datetime import date
from typing import Optional, Union

from .datetime_utils import parse_hhmm, parse_iso_date

DateLike = Union[date, str]


def compute_hours(check_in: Optional[str], check_out: Optional[str]) -> float:
    """Hours between two ``HH:MM`` times of the same day.

    Missing either time gives 0. A check-out before check-in clamps to 0;
    overnight shifts are not wrapped.
    """
    if not check_in or not check_out:
        return 0.0
    diff_minutes = parse_hhmm(check_out) - parse_hhmm(check_in)
    return max(0.0, diff_minutes / 60)


def _as_date(value: DateLike) -> date:
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


def compute_days(start_date: DateLike, end_date: DateLike) -> int:
    """Inclusive day count between two dates.

    Uses the absolute difference, so a reversed range still counts
    positively.
    """
    delta = _as_date(end_date) - _as_date(start_date)
    return abs(delta.days) + 1


def compute_net_salary(basic_salary: float, allowances: float = 0, deductions: float = 0) -> float:
    """basic + allowances - deductions. May be negative."""
    return float(basic_salary) + float(allowances) - float(deductions)
