from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, EmployeeQuery, EmployeeStats


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Services depend on this protocol, never on a concrete database.
    ``insert``/``update`` raise ConflictError on a duplicate email.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list(self, query: EmployeeQuery) -> tuple[Sequence[Employee], int]:
        """Return one page of employees and the total match count."""

        raise NotImplementedError

    def list_by_department(self, department_name: str) -> Sequence[Employee]:
        raise NotImplementedError

    def count_by_department(self, department_name: str) -> int:
        raise NotImplementedError

    def insert(self, employee: Employee) -> int:
        raise NotImplementedError

    def update(self, employee: Employee) -> None:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError

    def stats(self) -> EmployeeStats:
        raise NotImplementedError
