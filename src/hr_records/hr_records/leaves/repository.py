from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import LeaveQuery, LeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list(self, query: LeaveQuery) -> tuple[Sequence[LeaveRequest], int]:
        """Latest start date first, then newest created first."""

        raise NotImplementedError

    def insert(self, leave: LeaveRequest) -> int:
        raise NotImplementedError

    def update(self, leave: LeaveRequest) -> None:
        raise NotImplementedError

    def delete_by_id(self, leave_id: int) -> bool:
        raise NotImplementedError
