from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import PayrollQuery, PayrollRecord


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list(self, query: PayrollQuery) -> tuple[Sequence[PayrollRecord], int]:
        """Latest pay date first, then newest created first."""

        raise NotImplementedError

    def insert(self, record: PayrollRecord) -> int:
        raise NotImplementedError

    def update(self, record: PayrollRecord) -> None:
        raise NotImplementedError

    def delete_by_id(self, payroll_id: int) -> bool:
        raise NotImplementedError
