from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department, DepartmentQuery


class DepartmentRepository(Protocol):
    """``insert``/``update`` raise ConflictError on a duplicate name."""

    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Department]:
        raise NotImplementedError

    def list(self, query: DepartmentQuery) -> tuple[Sequence[Department], int]:
        raise NotImplementedError

    def insert(self, department: Department) -> int:
        raise NotImplementedError

    def update(self, department: Department) -> None:
        raise NotImplementedError

    def delete_by_id(self, department_id: int) -> bool:
        raise NotImplementedError
