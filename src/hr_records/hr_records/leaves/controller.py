from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_principal, json_payload, principal_required
from ..common.pagination import PageRequest
from ..container import Container
from .model import LeaveChanges, LeaveRequest


def leave_to_json(lv: LeaveRequest) -> dict:
    return {
        "id": lv.leave_id,
        "employeeId": lv.employee_id,
        "employeeName": lv.employee_name,
        "department": lv.department,
        "leaveType": lv.leave_type.value,
        "startDate": lv.start_date.isoformat(),
        "endDate": lv.end_date.isoformat(),
        "days": lv.days,
        "reason": lv.reason,
        "status": lv.status.value,
        "appliedDate": lv.applied_date.isoformat(),
        "createdAt": lv.created_at.isoformat() if lv.created_at else None,
        "updatedAt": lv.updated_at.isoformat() if lv.updated_at else None,
    }


def register(app: Flask, container: Container) -> None:
    auth = principal_required(container.auth_service.resolve_principal)
    service = container.leave_service

    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    @auth
    def list_leaves():
        page = service.list(
            current_principal(),
            page=PageRequest.from_args(request.args),
            search=request.args.get("search", ""),
            status=request.args.get("status", ""),
            leave_type=request.args.get("type", ""),
        )
        return jsonify(page.to_dict(leave_to_json))

    @app.route("/api/leaves/<int:leave_id>", methods=["GET"], endpoint="get_leave")
    @auth
    def get_leave(leave_id: int):
        return jsonify(leave_to_json(service.get(current_principal(), leave_id)))

    @app.route("/api/leaves", methods=["POST"], endpoint="create_leave")
    @auth
    def create_leave():
        leave = service.create(current_principal(), json_payload())
        return jsonify(leave_to_json(leave)), 201

    @app.route("/api/leaves/<int:leave_id>", methods=["PUT"], endpoint="update_leave")
    @auth
    def update_leave(leave_id: int):
        changes = LeaveChanges.from_payload(json_payload())
        return jsonify(leave_to_json(service.update(current_principal(), leave_id, changes)))

    @app.route("/api/leaves/<int:leave_id>/status", methods=["PATCH"], endpoint="transition_leave")
    @auth
    def transition_leave(leave_id: int):
        status = json_payload().get("status")
        return jsonify(leave_to_json(service.transition_status(current_principal(), leave_id, status)))

    @app.route("/api/leaves/<int:leave_id>", methods=["DELETE"], endpoint="delete_leave")
    @auth
    def delete_leave(leave_id: int):
        service.delete(current_principal(), leave_id)
        return jsonify({"message": "Leave request deleted successfully"})
