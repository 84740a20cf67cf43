from __future__ import annotations

from .enums import RejectReason


class DomainError(Exception):
    """Base exception for business rule violations."""

    def __init__(self, message: str, *, reason: RejectReason | None = None):
        super().__init__(message)
        self.reason = reason


class ValidationError(DomainError):
    """Raised when input data is invalid (non-positive hours, missing date...)."""


class PolicyError(DomainError):
    """Raised when a valid request is refused by a ledger rule."""


class StoreError(Exception):
    """Raised when the external ledger store fails."""
