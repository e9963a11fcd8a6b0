from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_principal, json_payload, principal_required
from ..common.pagination import PageRequest
from ..container import Container
from .model import Employee, EmployeeChanges


def employee_to_json(e: Employee) -> dict:
    return {
        "id": e.employee_id,
        "firstName": e.first_name,
        "lastName": e.last_name,
        "fullName": e.full_name,
        "email": e.email,
        "phone": e.phone,
        "position": e.position,
        "department": e.department,
        "salary": e.salary,
        "hireDate": e.hire_date.isoformat(),
        "status": e.status.value,
        "notes": e.notes,
        "createdAt": e.created_at.isoformat() if e.created_at else None,
        "updatedAt": e.updated_at.isoformat() if e.updated_at else None,
    }


def register(app: Flask, container: Container) -> None:
    auth = principal_required(container.auth_service.resolve_principal)
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @auth
    def list_employees():
        page = service.list(
            current_principal(),
            page=PageRequest.from_args(request.args),
            search=request.args.get("search", ""),
            department=request.args.get("department", ""),
            status=request.args.get("status", ""),
        )
        return jsonify(page.to_dict(employee_to_json))

    @app.route("/api/employees/stats/overview", methods=["GET"], endpoint="employee_stats")
    @auth
    def employee_stats():
        return jsonify(service.stats_overview(current_principal()))

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    @auth
    def get_employee(employee_id: int):
        return jsonify(employee_to_json(service.get(current_principal(), employee_id)))

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @auth
    def create_employee():
        employee = service.create(current_principal(), json_payload())
        return jsonify(employee_to_json(employee)), 201

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="update_employee")
    @auth
    def update_employee(employee_id: int):
        changes = EmployeeChanges.from_payload(json_payload())
        employee = service.update(current_principal(), employee_id, changes)
        return jsonify(employee_to_json(employee))

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @auth
    def delete_employee(employee_id: int):
        service.delete(current_principal(), employee_id)
        return jsonify({"message": "Employee deleted successfully"})
