import pytest
from werkzeug.security import generate_password_hash

from src.hr_records.hr_records.container import assemble
from src.hr_records.hr_records.core.enums import Role
from src.hr_records.hr_records.main import create_app


@pytest.fixture
def app(monkeypatch, users_repo, employees, departments, attendance_repo, leaves_repo, payroll_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    users_repo.create_user(
        email="admin@example.com",
        password_hash=generate_password_hash("admin123"),
        role=Role.ADMIN,
        employee_id=None,
    )
    container = assemble(
        users_repo=users_repo,
        employees_repo=employees,
        departments_repo=departments,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
        secret_key="test-secret",
    )
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def _signin(client, email, password):
    resp = client.post("/api/auth/signin", json={"email": email, "password": password})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture
def admin_headers(client):
    return _signin(client, "admin@example.com", "admin123")


@pytest.fixture
def asha_headers(client, asha):
    resp = client.post(
        "/api/auth/signup",
        json={"email": "asha.rao@example.com", "password": "secret1", "employeeId": asha.employee_id},
    )
    assert resp.status_code == 201
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


def test_requests_without_token_are_rejected(client):
    resp = client.get("/api/employees")

    assert resp.status_code == 401
    assert resp.get_json() == {"message": "Access denied. No token provided."}


def test_garbage_token_is_rejected(client):
    resp = client.get("/api/employees", headers={"Authorization": "Bearer not-a-token"})

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid token."


def test_signin_returns_account(client):
    resp = client.post("/api/auth/signin", json={"email": "admin@example.com", "password": "admin123"})

    body = resp.get_json()
    assert body["user"]["role"] == "admin"
    assert body["user"]["employee"] is None


def test_signin_failure_is_401(client):
    resp = client.post("/api/auth/signin", json={"email": "admin@example.com", "password": "nope"})
    assert resp.status_code == 401


def test_me_includes_linked_employee(client, asha, asha_headers):
    body = client.get("/api/auth/me", headers=asha_headers).get_json()

    assert body["role"] == "employee"
    assert body["employeeId"] == asha.employee_id
    assert body["employee"]["email"] == "asha.rao@example.com"


def test_employee_list_shape(client, admin_headers, asha, ravi):
    resp = client.get("/api/employees?page=1&limit=1", headers=admin_headers)

    body = resp.get_json()
    assert resp.status_code == 200
    assert list(body) == ["items", "total", "page", "totalPages"]
    assert body["total"] == 2
    assert body["totalPages"] == 2
    assert body["items"][0]["firstName"] == "Ravi"


def test_validation_errors_list_every_field(client, admin_headers):
    resp = client.post("/api/employees", json={"firstName": "Meera"}, headers=admin_headers)

    body = resp.get_json()
    assert resp.status_code == 400
    assert {e["field"] for e in body["errors"]} >= {"lastName", "email", "department"}


def test_non_object_body_is_400(client, admin_headers):
    resp = client.post("/api/employees", json=["nope"], headers=admin_headers)
    assert resp.status_code == 400


def test_forbidden_carries_reason(client, asha_headers):
    resp = client.get("/api/payroll", headers=asha_headers)

    assert resp.status_code == 403
    assert resp.get_json()["reason"] == "forbidden-role"


def test_not_found(client, admin_headers):
    resp = client.get("/api/attendance/999", headers=admin_headers)
    assert resp.status_code == 404


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nowhere")

    assert resp.status_code == 404
    assert "message" in resp.get_json()


def test_duplicate_attendance_is_409(client, admin_headers, asha):
    payload = {"employeeId": asha.employee_id, "date": "2024-03-04", "checkIn": "09:00", "checkOut": "17:00"}

    first = client.post("/api/attendance", json=payload, headers=admin_headers)
    second = client.post("/api/attendance", json=payload, headers=admin_headers)

    assert first.status_code == 201
    assert first.get_json()["hours"] == 8.0
    assert second.status_code == 409


def test_leave_flow(client, admin_headers, asha_headers, asha):
    created = client.post(
        "/api/leaves",
        json={
            "leaveType": "Sick Leave",
            "startDate": "2024-03-04",
            "endDate": "2024-03-05",
            "reason": "Flu",
            "status": "approved",
        },
        headers=asha_headers,
    )
    assert created.status_code == 201
    leave = created.get_json()
    assert leave["employeeId"] == asha.employee_id
    assert leave["status"] == "pending"
    assert leave["days"] == 2

    denied = client.patch(f"/api/leaves/{leave['id']}/status", json={"status": "approved"}, headers=asha_headers)
    assert denied.status_code == 403
    assert denied.get_json()["reason"] == "invalid-status-for-operation"

    approved = client.patch(f"/api/leaves/{leave['id']}/status", json={"status": "approved"}, headers=admin_headers)
    assert approved.status_code == 200
    assert approved.get_json()["status"] == "approved"

    locked = client.put(f"/api/leaves/{leave['id']}", json={"reason": "Still flu"}, headers=asha_headers)
    assert locked.status_code == 403


def test_payroll_create_and_month_filter(client, admin_headers, asha):
    created = client.post(
        "/api/payroll",
        json={"employeeId": asha.employee_id, "basicSalary": 5000, "allowances": 500, "deductions": 200, "payDate": "2024-03-31"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    assert created.get_json()["netSalary"] == 5300.0

    march = client.get("/api/payroll?month=2024-03", headers=admin_headers).get_json()
    april = client.get("/api/payroll?month=2024-04", headers=admin_headers).get_json()
    assert march["total"] == 1
    assert april["total"] == 0


def test_department_delete_blocked_while_staffed(client, admin_headers, asha):
    dept = client.post("/api/departments", json={"name": "CSE", "manager": asha.employee_id}, headers=admin_headers)
    assert dept.status_code == 201
    assert dept.get_json()["manager"]["id"] == asha.employee_id

    resp = client.delete(f"/api/departments/{dept.get_json()['id']}", headers=admin_headers)
    assert resp.status_code == 409
