from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for accounts.

    ``create_user`` raises ConflictError when the email or the linked
    employee already has an account.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_employee_id(self, employee_id: int) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        role: Role,
        employee_id: Optional[int],
    ) -> int:
        raise NotImplementedError
