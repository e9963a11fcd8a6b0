from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..core.enums import LeaveStatus
from ..core.exceptions import AuthorizationError


class DenyReason(str, Enum):
    FORBIDDEN_ROLE = "forbidden-role"
    NOT_OWNER = "not-owner"
    INVALID_STATUS_FOR_OPERATION = "invalid-status-for-operation"


@dataclass(frozen=True)
class Scope:
    """Narrowing applied to queries for a principal.

    ``restricted`` with ``owner_id=None`` matches nothing (an employee
    account without a linked employee record).
    """

    restricted: bool = False
    owner_id: Optional[int] = None
    search_enabled: bool = True

    @classmethod
    def unrestricted(cls) -> "Scope":
        return cls()

    @classmethod
    def owned_by(cls, owner_id: Optional[int]) -> "Scope":
        return cls(restricted=True, owner_id=owner_id, search_enabled=False)

    @property
    def matches_nothing(self) -> bool:
        return self.restricted and self.owner_id is None


@dataclass(frozen=True)
class Allow:
    scope: Scope = Scope()
    # None means every field of the payload may be written.
    writable_fields: Optional[frozenset[str]] = None
    forced_status: Optional[LeaveStatus] = None

    allowed = True

    def can_write(self, field: str) -> bool:
        return self.writable_fields is None or field in self.writable_fields


@dataclass(frozen=True)
class Deny:
    reason: DenyReason
    message: str

    allowed = False


Decision = Union[Allow, Deny]


def ensure_allowed(decision: Decision) -> Allow:
    """Turn a Deny into AuthorizationError; return the Allow otherwise."""
    if isinstance(decision, Deny):
        raise AuthorizationError(decision.message, decision.reason.value)
    return decision
