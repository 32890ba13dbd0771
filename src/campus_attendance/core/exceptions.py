from __future__ import annotations

from .enums import RejectionReason


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class UnauthenticatedError(DomainError):
    """Raised when an action needs a signed-in user and there is none."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class AttendanceNotAllowedError(AuthorizationError):
    """Raised when a submission is attempted outside of what eligibility allows."""

    def __init__(self, reason: RejectionReason, message: str):
        super().__init__(message)
        self.reason = reason


class DuplicateEnrollmentError(DomainError):
    """Raised when a student enrolls twice in the same lecture."""


class DuplicateAttendanceError(DomainError):
    """Raised when a student submits attendance twice for the same lecture."""


class StoreError(DomainError):
    """Any other failure from the data store. The operation was not applied."""
