from __future__ import annotations

import logging
from typing import Any, Mapping

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import FieldErrors, require_min_length
from ..core.constants import DEFAULT_TOKEN_MAX_AGE_DAYS, MIN_PASSWORD_LENGTH, TOKEN_SALT
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..core.principal import Principal
from ..employees.repository import EmployeeRepository
from ..policy.model import DenyReason
from .model import DUPLICATE_EMPLOYEE_ACCOUNT, DUPLICATE_USER, AccountView, User
from .repository import UserRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """Use cases: sign in, sign up, and turn a bearer token into a Principal.

    Tokens are signed with the application secret and carry only the user
    id; role and employee link are re-read from storage on every request,
    so deactivating an account takes effect immediately.
    """

    def __init__(
        self,
        users: UserRepository,
        employees: EmployeeRepository,
        *,
        secret_key: str,
        token_max_age_days: int = DEFAULT_TOKEN_MAX_AGE_DAYS,
        allow_admin_signup: bool = False,
    ):
        self._users = users
        self._employees = employees
        self._serializer = URLSafeTimedSerializer(secret_key, salt=TOKEN_SALT)
        self._max_age_seconds = int(token_max_age_days) * 24 * 60 * 60
        self._allow_admin_signup = bool(allow_admin_signup)

    def issue_token(self, user: User) -> str:
        return self._serializer.dumps({"userId": user.user_id})

    def resolve_principal(self, token: str) -> Principal:
        try:
            data = self._serializer.loads(token, max_age=self._max_age_seconds)
        except SignatureExpired:
            raise AuthenticationError("Token expired. Please sign in again.")
        except BadSignature:
            raise AuthenticationError("Invalid token.")

        user_id = data.get("userId") if isinstance(data, dict) else None
        user = self._users.get_by_id(int(user_id)) if user_id is not None else None
        if not user or not user.is_active:
            raise AuthenticationError("Invalid token.")
        return Principal(user_id=user.user_id, role=user.role, employee_id=user.employee_id)

    def _view(self, user: User) -> AccountView:
        employee = self._employees.get_by_id(user.employee_id) if user.employee_id is not None else None
        return AccountView(user=user, employee=employee)

    def signin(self, email: Any, password: Any) -> tuple[str, AccountView]:
        errors = FieldErrors()
        email = errors.text(email, "email", message="Valid email is required")
        password = errors.text(password, "password", message="Password is required")
        errors.raise_if_any()

        user = self._users.get_by_email(email.lower())
        if not user:
            logger.warning("sign in failed: unknown email")
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not user.is_active:
            logger.warning("sign in refused: user %s is inactive", user.user_id)
            raise AuthenticationError("Account is inactive")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME'
            ok = False
        if not ok:
            logger.warning("sign in failed: bad password for user %s", user.user_id)
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("user %s signed in", user.user_id)
        return self.issue_token(user), self._view(user)

    def signup(self, payload: Mapping[str, Any]) -> tuple[str, AccountView]:
        errors = FieldErrors()
        email = errors.text(payload.get("email"), "email", message="Valid email is required")
        if email is not None and "@" not in email:
            errors.add("email", "Valid email is required")
        password = errors.text(payload.get("password"), "password", message="Password is required")
        role = errors.choice(payload.get("role"), "role", Role, required=False, message="Role must be admin or employee")
        employee_id = errors.identifier(payload.get("employeeId"), "employeeId", required=False)
        errors.raise_if_any()

        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        role = role or Role.EMPLOYEE
        email = email.lower()

        if role == Role.ADMIN and not self._allow_admin_signup:
            raise AuthorizationError("Admin sign up is disabled.", DenyReason.FORBIDDEN_ROLE.value)

        if role == Role.EMPLOYEE and employee_id is None:
            raise ValidationError(
                "Employee ID is required for employee role",
                [{"field": "employeeId", "message": "Employee ID is required for employee role"}],
            )
        if employee_id is not None:
            if not self._employees.get_by_id(employee_id):
                raise NotFoundError("Employee not found")
            if self._users.get_by_employee_id(employee_id):
                raise ConflictError(DUPLICATE_EMPLOYEE_ACCOUNT)

        if self._users.get_by_email(email):
            raise ConflictError(DUPLICATE_USER)

        user_id = self._users.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            employee_id=employee_id,
        )
        user = self._users.get_by_id(user_id)
        logger.info("user %s signed up with role %s", user_id, role.value)
        return self.issue_token(user), self._view(user)

    def me(self, principal: Principal) -> AccountView:
        user = self._users.get_by_id(principal.user_id)
        if not user:
            raise NotFoundError("User not found")
        return self._view(user)
