from datetime import date

import pytest

from src.hr_records.hr_records.attendance.model import AttendanceChanges
from src.hr_records.hr_records.attendance.service import AttendanceService
from src.hr_records.hr_records.common.pagination import PageRequest
from src.hr_records.hr_records.core.enums import AttendanceStatus
from src.hr_records.hr_records.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.hr_records.hr_records.employees.model import EmployeeChanges
from src.hr_records.hr_records.employees.service import EmployeeService
from tests.fakes import RacyAttendanceRepository


@pytest.fixture
def service(attendance_repo, employees):
    return AttendanceService(attendance_repo, employees)


def _record(service, admin, employee, day, **extra):
    payload = {"employeeId": employee.employee_id, "date": day, "checkIn": "09:00", "checkOut": "17:30"}
    payload.update(extra)
    return service.create(admin, payload)


def test_create_snapshots_employee_and_computes_hours(service, admin, asha):
    record = _record(service, admin, asha, "2024-03-04")

    assert record.employee_name == "Asha Rao"
    assert record.department == "CSE"
    assert record.work_date == date(2024, 3, 4)
    assert record.hours == pytest.approx(8.5)
    assert record.status == AttendanceStatus.PRESENT


def test_snapshot_is_not_refreshed_by_employee_edits(service, admin, asha, employees):
    record = _record(service, admin, asha, "2024-03-04")
    EmployeeService(employees).update(admin, asha.employee_id, EmployeeChanges.from_payload({"department": "ECE"}))

    assert service.get(admin, record.attendance_id).department == "CSE"


def test_create_for_unknown_employee_is_not_found(service, admin):
    with pytest.raises(NotFoundError):
        service.create(admin, {"employeeId": 404, "date": "2024-03-04"})


def test_create_validates_all_fields(service, admin):
    with pytest.raises(ValidationError) as exc:
        service.create(admin, {"checkIn": "9 o'clock", "status": "sleeping"})

    assert {e["field"] for e in exc.value.errors} == {"employeeId", "date", "checkIn", "status"}


def test_second_record_for_same_day_conflicts(service, admin, asha, attendance_repo):
    _record(service, admin, asha, "2024-03-04")

    with pytest.raises(ConflictError):
        _record(service, admin, asha, "2024-03-04", checkIn="10:00")
    assert len(attendance_repo.rows) == 1


def test_conflict_surfaces_from_storage_when_precheck_is_raced(admin, asha, employees):
    racy = RacyAttendanceRepository()
    service = AttendanceService(racy, employees)
    _record(service, admin, asha, "2024-03-04")

    with pytest.raises(ConflictError):
        _record(service, admin, asha, "2024-03-04")
    assert len(racy.rows) == 1


def test_employee_cannot_create_attendance(service, asha, asha_principal):
    with pytest.raises(AuthorizationError) as exc:
        service.create(asha_principal, {"employeeId": asha.employee_id, "date": "2024-03-04"})
    assert exc.value.reason == "forbidden-role"


def test_employee_list_ignores_search_and_sees_only_own(service, admin, asha, ravi, asha_principal):
    _record(service, admin, asha, "2024-03-04")
    _record(service, admin, asha, "2024-03-05")
    _record(service, admin, ravi, "2024-03-05")

    page = service.list(asha_principal, page=PageRequest(), search="Ravi")

    assert page.total == 2
    assert {r.employee_id for r in page.items} == {asha.employee_id}
    assert [r.work_date for r in page.items] == [date(2024, 3, 5), date(2024, 3, 4)]


def test_admin_search_and_date_filter(service, admin, asha, ravi):
    _record(service, admin, asha, "2024-03-04")
    _record(service, admin, ravi, "2024-03-04")
    _record(service, admin, ravi, "2024-03-05")

    assert service.list(admin, page=PageRequest(), search="ravi").total == 2
    assert service.list(admin, page=PageRequest(), work_date="2024-03-04").total == 2


def test_unlinked_employee_sees_nothing(service, admin, asha, unlinked_principal):
    _record(service, admin, asha, "2024-03-04")

    page = service.list(unlinked_principal, page=PageRequest())

    assert page.total == 0
    assert page.items == []


def test_employee_reads_own_record_only(service, admin, asha, ravi, ravi_principal):
    record = _record(service, admin, asha, "2024-03-04")

    with pytest.raises(AuthorizationError) as exc:
        service.get(ravi_principal, record.attendance_id)
    assert exc.value.reason == "not-owner"


def test_update_recomputes_hours_from_merged_state(service, admin, asha):
    record = _record(service, admin, asha, "2024-03-04")

    updated = service.update(admin, record.attendance_id, AttendanceChanges.from_payload({"checkOut": "13:00"}))
    assert updated.check_in == "09:00"
    assert updated.hours == pytest.approx(4.0)

    cleared = service.update(admin, record.attendance_id, AttendanceChanges.from_payload({"checkIn": None}))
    assert cleared.check_in is None
    assert cleared.hours == 0.0


def test_update_without_time_fields_keeps_hours(service, admin, asha):
    record = _record(service, admin, asha, "2024-03-04")

    updated = service.update(admin, record.attendance_id, AttendanceChanges.from_payload({"status": "late"}))

    assert updated.status == AttendanceStatus.LATE
    assert updated.hours == pytest.approx(8.5)


def test_moving_record_onto_taken_date_conflicts(service, admin, asha):
    _record(service, admin, asha, "2024-03-04")
    second = _record(service, admin, asha, "2024-03-05")

    with pytest.raises(ConflictError):
        service.update(admin, second.attendance_id, AttendanceChanges.from_payload({"date": "2024-03-04"}))


def test_delete(service, admin, asha, attendance_repo):
    record = _record(service, admin, asha, "2024-03-04")

    service.delete(admin, record.attendance_id)

    assert attendance_repo.get_by_id(record.attendance_id) is None
    with pytest.raises(NotFoundError):
        service.delete(admin, record.attendance_id)
