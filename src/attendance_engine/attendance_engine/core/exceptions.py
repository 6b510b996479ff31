from __future__ import annotations

from .enums import FailureKind


class DomainError(Exception):
    """Base exception for business rule violations.

    Every instance carries a ``FailureKind`` so callers can branch on the
    violation without parsing the (user-facing) message.
    """

    def __init__(self, message: str, *, kind: FailureKind):
        super().__init__(message)
        self.message = message
        self.kind = kind

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced employee, record or request cannot be resolved."""


class ConflictError(DomainError):
    """Raised when a leave range overlaps an approved one."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
