from __future__ import annotations

from typing import Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import DUPLICATE_EMPLOYEE_ACCOUNT, DUPLICATE_USER, User
from .repository import UserRepository

_COLUMNS = "user_id, email, password_hash, role, employee_id, is_active, created_at"


def _row_to_user(row: dict) -> User:
    employee_id = row.get("employee_id")
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        employee_id=int(employee_id) if employee_id is not None else None,
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id", int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def get_by_employee_id(self, employee_id: int) -> Optional[User]:
        return self._get_one("employee_id", int(employee_id))

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        role: Role,
        employee_id: Optional[int],
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(email, password_hash, role, employee_id, is_active)
                    VALUES(%s,%s,%s,%s,1)
                    """,
                    (email, password_hash, role.value, employee_id),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno != errorcode.ER_DUP_ENTRY:
                raise
            # Two unique keys on this table; the key name tells them apart.
            if "uq_users_employee" in str(e.msg):
                raise ConflictError(DUPLICATE_EMPLOYEE_ACCOUNT) from e
            raise ConflictError(DUPLICATE_USER) from e
