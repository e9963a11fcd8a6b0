import pytest

from src.hr_records.hr_records.common.pagination import PageRequest
from src.hr_records.hr_records.core.enums import DepartmentStatus
from src.hr_records.hr_records.core.exceptions import AuthorizationError, ConflictError, ValidationError
from src.hr_records.hr_records.departments.model import DepartmentChanges
from src.hr_records.hr_records.departments.service import DepartmentService
from tests.fakes import make_employee


@pytest.fixture
def service(departments, employees):
    return DepartmentService(departments, employees)


def test_create_resolves_manager(service, admin, asha):
    view = service.create(admin, {"name": "CSE", "manager": asha.employee_id, "budget": 100000, "location": "Block A"})

    assert view.department.name == "CSE"
    assert view.department.status == DepartmentStatus.ACTIVE
    assert view.manager == asha


def test_dangling_manager_resolves_to_none(service, admin):
    view = service.create(admin, {"name": "Research", "manager": 999})

    assert view.department.manager_id == 999
    assert view.manager is None


def test_create_validation_and_duplicate_name(service, admin):
    with pytest.raises(ValidationError) as exc:
        service.create(admin, {"name": " ", "budget": -1})
    assert {e["field"] for e in exc.value.errors} == {"name", "budget"}

    service.create(admin, {"name": "CSE"})
    with pytest.raises(ConflictError):
        service.create(admin, {"name": "CSE"})


def test_departments_are_admin_only(service, asha_principal):
    with pytest.raises(AuthorizationError) as exc:
        service.list(asha_principal, page=PageRequest())
    assert exc.value.reason == "forbidden-role"


def test_list_sorted_by_name(service, admin):
    for name in ("MEC", "CSE", "ECE"):
        service.create(admin, {"name": name})

    page = service.list(admin, page=PageRequest())
    assert [v.department.name for v in page.items] == ["CSE", "ECE", "MEC"]
    assert page.total == 3


def test_members_are_matched_by_name_and_sorted(service, admin, employees):
    employees.insert(make_employee("Zoya", "Khan", "zoya@example.com", department="CSE"))
    employees.insert(make_employee("Arun", "Das", "arun@example.com", department="CSE"))
    employees.insert(make_employee("Ravi", "Kumar", "ravi@example.com", department="ECE"))
    cse = service.create(admin, {"name": "CSE"}).department

    members = service.list_employees(admin, cse.department_id)

    assert [e.first_name for e in members] == ["Arun", "Zoya"]


def test_delete_refused_while_employees_carry_the_name(service, admin, asha, departments):
    cse = service.create(admin, {"name": "CSE"}).department

    with pytest.raises(ConflictError):
        service.delete(admin, cse.department_id)
    assert departments.get_by_id(cse.department_id) is not None


def test_delete_empty_department(service, admin, departments):
    empty = service.create(admin, {"name": "Library"}).department

    service.delete(admin, empty.department_id)

    assert departments.get_by_id(empty.department_id) is None


def test_rename_does_not_cascade_to_employees(service, admin, asha, employees):
    cse = service.create(admin, {"name": "CSE"}).department

    renamed = service.update(admin, cse.department_id, DepartmentChanges.from_payload({"name": "Computer Science"}))

    assert renamed.department.name == "Computer Science"
    assert employees.get_by_id(asha.employee_id).department == "CSE"


def test_rename_to_existing_name_conflicts(service, admin):
    service.create(admin, {"name": "CSE"})
    ece = service.create(admin, {"name": "ECE"}).department

    with pytest.raises(ConflictError):
        service.update(admin, ece.department_id, DepartmentChanges.from_payload({"name": "CSE"}))
