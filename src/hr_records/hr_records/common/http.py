"""Flask glue shared by the JSON controllers."""
from __future__ import annotations

from functools import wraps
from typing import Any, Callable

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ..core.principal import Principal


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Access denied. No token provided.")
    return token.strip()


def principal_required(resolve: Callable[[str], Principal]):
    """Resolve the bearer token into ``g.principal`` before the view runs."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.principal = resolve(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_principal() -> Principal:
    return g.principal


def json_payload() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object", [{"field": "body", "message": "Expected a JSON object"}])
    return payload


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e: ValidationError):
        return jsonify({"message": str(e), "errors": e.errors}), 400

    @app.errorhandler(AuthenticationError)
    def _unauthenticated(e: AuthenticationError):
        return jsonify({"message": str(e)}), 401

    @app.errorhandler(AuthorizationError)
    def _forbidden(e: AuthorizationError):
        return jsonify({"message": str(e), "reason": e.reason}), 403

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"message": str(e)}), 404

    @app.errorhandler(ConflictError)
    def _conflict(e: ConflictError):
        return jsonify({"message": str(e)}), 409

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return jsonify({"message": e.description}), e.code

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        app.logger.exception("unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return jsonify({"message": f"Server error: {e}"}), 500
        return jsonify({"message": "Server error"}), 500
