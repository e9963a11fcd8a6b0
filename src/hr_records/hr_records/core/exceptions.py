from __future__ import annotations

from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``errors`` lists every failing field as ``{"field": ..., "message": ...}``.
    """

    def __init__(self, message: str = "Validation failed", errors: Optional[Sequence[dict]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class AuthenticationError(DomainError):
    """Raised when no valid principal can be resolved."""


class AuthorizationError(DomainError):
    """Raised when the policy denies an operation."""

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason


class NotFoundError(DomainError):
    """Raised when a target or referenced record does not exist."""


class ConflictError(DomainError):
    """Raised when a uniqueness constraint would be violated."""
