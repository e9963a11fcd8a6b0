from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_principal, json_payload, principal_required
from ..container import Container
from ..employees.controller import employee_to_json
from .model import AccountView


def account_to_json(view: AccountView) -> dict:
    u = view.user
    return {
        "id": u.user_id,
        "email": u.email,
        "role": u.role.value,
        "employeeId": u.employee_id,
        "employee": employee_to_json(view.employee) if view.employee else None,
    }


def register(app: Flask, container: Container) -> None:
    auth = principal_required(container.auth_service.resolve_principal)
    service = container.auth_service

    @app.route("/api/auth/signin", methods=["POST"], endpoint="signin")
    def signin():
        payload = json_payload()
        token, view = service.signin(payload.get("email"), payload.get("password"))
        return jsonify({"token": token, "user": account_to_json(view)})

    @app.route("/api/auth/signup", methods=["POST"], endpoint="signup")
    def signup():
        token, view = service.signup(json_payload())
        return jsonify({"token": token, "user": account_to_json(view)}), 201

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @auth
    def me():
        return jsonify(account_to_json(service.me(current_principal())))
