import pytest

from src.hr_records.hr_records.payroll.calculator.standard_calculator import StandardPayrollCalculator


def test_standard_calculator_adds_allowances_and_subtracts_deductions():
    calc = StandardPayrollCalculator()
    assert calc.net_salary(5000, 750, 250) == pytest.approx(5500.0)


def test_standard_calculator_has_no_floor():
    calc = StandardPayrollCalculator()
    assert calc.net_salary(1000, 0, 2500) == pytest.approx(-1500.0)


def test_standard_calculator_treats_missing_parts_as_zero():
    calc = StandardPayrollCalculator()
    assert calc.net_salary(1000, None, None) == pytest.approx(1000.0)
