from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_principal, json_payload, principal_required
from ..common.pagination import PageRequest
from ..container import Container
from ..employees.controller import employee_to_json
from .model import DepartmentChanges, DepartmentView


def department_to_json(view: DepartmentView) -> dict:
    d = view.department
    manager = None
    if view.manager is not None:
        manager = {
            "id": view.manager.employee_id,
            "firstName": view.manager.first_name,
            "lastName": view.manager.last_name,
            "email": view.manager.email,
        }
    return {
        "id": d.department_id,
        "name": d.name,
        "description": d.description,
        "manager": manager,
        "budget": d.budget,
        "location": d.location,
        "establishedDate": d.established_date.isoformat(),
        "status": d.status.value,
        "createdAt": d.created_at.isoformat() if d.created_at else None,
        "updatedAt": d.updated_at.isoformat() if d.updated_at else None,
    }


def register(app: Flask, container: Container) -> None:
    auth = principal_required(container.auth_service.resolve_principal)
    service = container.department_service

    @app.route("/api/departments", methods=["GET"], endpoint="list_departments")
    @auth
    def list_departments():
        page = service.list(
            current_principal(),
            page=PageRequest.from_args(request.args),
            search=request.args.get("search", ""),
            status=request.args.get("status", ""),
        )
        return jsonify(page.to_dict(department_to_json))

    @app.route("/api/departments/<int:department_id>", methods=["GET"], endpoint="get_department")
    @auth
    def get_department(department_id: int):
        return jsonify(department_to_json(service.get(current_principal(), department_id)))

    @app.route("/api/departments/<int:department_id>/employees", methods=["GET"], endpoint="department_employees")
    @auth
    def department_employees(department_id: int):
        members = service.list_employees(current_principal(), department_id)
        return jsonify([employee_to_json(e) for e in members])

    @app.route("/api/departments", methods=["POST"], endpoint="create_department")
    @auth
    def create_department():
        view = service.create(current_principal(), json_payload())
        return jsonify(department_to_json(view)), 201

    @app.route("/api/departments/<int:department_id>", methods=["PUT"], endpoint="update_department")
    @auth
    def update_department(department_id: int):
        changes = DepartmentChanges.from_payload(json_payload())
        return jsonify(department_to_json(service.update(current_principal(), department_id, changes)))

    @app.route("/api/departments/<int:department_id>", methods=["DELETE"], endpoint="delete_department")
    @auth
    def delete_department(department_id: int):
        service.delete(current_principal(), department_id)
        return jsonify({"message": "Department deleted successfully"})
