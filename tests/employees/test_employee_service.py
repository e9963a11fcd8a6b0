from datetime import date

import pytest

from src.hr_records.hr_records.common.pagination import PageRequest
from src.hr_records.hr_records.core.enums import EmployeeStatus
from src.hr_records.hr_records.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from src.hr_records.hr_records.employees.model import EmployeeChanges
from src.hr_records.hr_records.employees.service import EmployeeService


def _payload(**overrides):
    payload = {
        "firstName": "Meera",
        "lastName": "Iyer",
        "email": "Meera.Iyer@Example.com",
        "phone": "555-0111",
        "department": "MEC",
        "salary": 61000,
        "hireDate": "2024-02-01",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def service(employees):
    return EmployeeService(employees)


def test_create_defaults_and_lowercases_email(service, admin):
    employee = service.create(admin, _payload())

    assert employee.employee_id > 0
    assert employee.email == "meera.iyer@example.com"
    assert employee.status == EmployeeStatus.ACTIVE
    assert employee.hire_date == date(2024, 2, 1)
    assert employee.full_name == "Meera Iyer"


def test_create_reports_every_invalid_field(service, admin):
    with pytest.raises(ValidationError) as exc:
        service.create(admin, {"firstName": "", "email": "nope", "salary": -5})

    fields = {e["field"] for e in exc.value.errors}
    assert fields == {"firstName", "lastName", "email", "phone", "department", "salary"}


def test_create_duplicate_email_conflicts(service, admin, asha):
    with pytest.raises(ConflictError):
        service.create(admin, _payload(email="ASHA.RAO@example.com"))


def test_employee_principal_cannot_create(service, asha_principal):
    with pytest.raises(AuthorizationError) as exc:
        service.create(asha_principal, {})
    assert exc.value.reason == "forbidden-role"


def test_employee_reads_own_profile_only(service, asha, ravi, asha_principal):
    assert service.get(asha_principal, asha.employee_id) == asha

    with pytest.raises(AuthorizationError) as exc:
        service.get(asha_principal, ravi.employee_id)
    assert exc.value.reason == "not-owner"


def test_get_missing_is_not_found(service, admin):
    with pytest.raises(NotFoundError):
        service.get(admin, 404)


def test_list_filters_and_sorts_newest_first(service, admin, asha, ravi):
    page = service.list(admin, page=PageRequest())
    assert [e.employee_id for e in page.items] == [ravi.employee_id, asha.employee_id]

    page = service.list(admin, page=PageRequest(), department="ECE")
    assert [e.first_name for e in page.items] == ["Ravi"]

    page = service.list(admin, page=PageRequest(), search="rao")
    assert [e.first_name for e in page.items] == ["Asha"]


def test_list_rejects_unknown_status_filter(service, admin):
    with pytest.raises(ValidationError):
        service.list(admin, page=PageRequest(), status="retired")


def test_update_applies_only_present_fields(service, admin, asha):
    updated = service.update(admin, asha.employee_id, EmployeeChanges.from_payload({"salary": 55000, "notes": None}))

    assert updated.salary == 55000.0
    assert updated.notes is None
    assert updated.first_name == asha.first_name
    assert updated.email == asha.email


def test_update_to_taken_email_conflicts(service, admin, asha, ravi):
    with pytest.raises(ConflictError):
        service.update(admin, ravi.employee_id, EmployeeChanges.from_payload({"email": asha.email}))


def test_delete_removes_employee(service, admin, asha, employees):
    service.delete(admin, asha.employee_id)
    assert employees.get_by_id(asha.employee_id) is None


def test_stats_overview(service, admin, asha, ravi):
    service.update(admin, ravi.employee_id, EmployeeChanges.from_payload({"status": "inactive"}))

    stats = service.stats_overview(admin)

    assert stats["totalEmployees"] == 2
    assert stats["activeEmployees"] == 1
    assert stats["avgSalary"] == pytest.approx(46000.0)
    assert stats["departmentStats"] == [{"department": "CSE", "count": 1}, {"department": "ECE", "count": 1}]


def test_stats_overview_is_admin_only(service, asha_principal):
    with pytest.raises(AuthorizationError):
        service.stats_overview(asha_principal)
