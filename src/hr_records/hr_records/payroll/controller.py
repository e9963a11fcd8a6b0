from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_principal, json_payload, principal_required
from ..common.pagination import PageRequest
from ..container import Container
from .model import PayrollChanges, PayrollRecord


def payroll_to_json(p: PayrollRecord) -> dict:
    return {
        "id": p.payroll_id,
        "employeeId": p.employee_id,
        "employeeName": p.employee_name,
        "department": p.department,
        "basicSalary": p.basic_salary,
        "allowances": p.allowances,
        "deductions": p.deductions,
        "netSalary": p.net_salary,
        "payDate": p.pay_date.isoformat(),
        "status": p.status.value,
        "bankAccount": p.bank_account,
        "createdAt": p.created_at.isoformat() if p.created_at else None,
        "updatedAt": p.updated_at.isoformat() if p.updated_at else None,
    }


def register(app: Flask, container: Container) -> None:
    auth = principal_required(container.auth_service.resolve_principal)
    service = container.payroll_service

    @app.route("/api/payroll", methods=["GET"], endpoint="list_payroll")
    @auth
    def list_payroll():
        page = service.list(
            current_principal(),
            page=PageRequest.from_args(request.args),
            search=request.args.get("search", ""),
            status=request.args.get("status", ""),
            month=request.args.get("month", ""),
        )
        return jsonify(page.to_dict(payroll_to_json))

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="get_payroll")
    @auth
    def get_payroll(payroll_id: int):
        return jsonify(payroll_to_json(service.get(current_principal(), payroll_id)))

    @app.route("/api/payroll", methods=["POST"], endpoint="create_payroll")
    @auth
    def create_payroll():
        record = service.create(current_principal(), json_payload())
        return jsonify(payroll_to_json(record)), 201

    @app.route("/api/payroll/<int:payroll_id>", methods=["PUT"], endpoint="update_payroll")
    @auth
    def update_payroll(payroll_id: int):
        changes = PayrollChanges.from_payload(json_payload())
        return jsonify(payroll_to_json(service.update(current_principal(), payroll_id, changes)))

    @app.route("/api/payroll/<int:payroll_id>/status", methods=["PATCH"], endpoint="transition_payroll")
    @auth
    def transition_payroll(payroll_id: int):
        status = json_payload().get("status")
        return jsonify(payroll_to_json(service.transition_status(current_principal(), payroll_id, status)))

    @app.route("/api/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="delete_payroll")
    @auth
    def delete_payroll(payroll_id: int):
        service.delete(current_principal(), payroll_id)
        return jsonify({"message": "Payroll record deleted successfully"})
