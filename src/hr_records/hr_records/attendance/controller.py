from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_principal, json_payload, principal_required
from ..common.pagination import PageRequest
from ..container import Container
from .model import AttendanceChanges, AttendanceRecord


def attendance_to_json(a: AttendanceRecord) -> dict:
    return {
        "id": a.attendance_id,
        "employeeId": a.employee_id,
        "employeeName": a.employee_name,
        "department": a.department,
        "date": a.work_date.isoformat(),
        "checkIn": a.check_in,
        "checkOut": a.check_out,
        "hours": a.hours,
        "status": a.status.value,
        "notes": a.notes,
        "createdAt": a.created_at.isoformat() if a.created_at else None,
        "updatedAt": a.updated_at.isoformat() if a.updated_at else None,
    }


def register(app: Flask, container: Container) -> None:
    auth = principal_required(container.auth_service.resolve_principal)
    service = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    @auth
    def list_attendance():
        page = service.list(
            current_principal(),
            page=PageRequest.from_args(request.args),
            search=request.args.get("search", ""),
            status=request.args.get("status", ""),
            work_date=request.args.get("date", ""),
        )
        return jsonify(page.to_dict(attendance_to_json))

    @app.route("/api/attendance/<int:attendance_id>", methods=["GET"], endpoint="get_attendance")
    @auth
    def get_attendance(attendance_id: int):
        return jsonify(attendance_to_json(service.get(current_principal(), attendance_id)))

    @app.route("/api/attendance", methods=["POST"], endpoint="create_attendance")
    @auth
    def create_attendance():
        record = service.create(current_principal(), json_payload())
        return jsonify(attendance_to_json(record)), 201

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="update_attendance")
    @auth
    def update_attendance(attendance_id: int):
        changes = AttendanceChanges.from_payload(json_payload())
        return jsonify(attendance_to_json(service.update(current_principal(), attendance_id, changes)))

    @app.route("/api/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="delete_attendance")
    @auth
    def delete_attendance(attendance_id: int):
        service.delete(current_principal(), attendance_id)
        return jsonify({"message": "Attendance record deleted successfully"})
