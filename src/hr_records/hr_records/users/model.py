from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..employees.model import Employee

DUPLICATE_USER = "User with this email already exists"
DUPLICATE_EMPLOYEE_ACCOUNT = "Employee already has a user account"


@dataclass(frozen=True)
class User:
    """Authentication account. Holds no record data of its own.

    ``employee_id`` links an ``employee`` account to its Employee record;
    admins may have none.
    """

    user_id: int
    email: str
    password_hash: str
    role: Role
    employee_id: Optional[int] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AccountView:
    """A user with the linked employee resolved (None when unlinked or dangling)."""

    user: User
    employee: Optional[Employee] = None
