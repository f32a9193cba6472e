from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing or invalid. No state is changed."""


class NotFoundError(DomainError):
    """Raised when a staff member, schedule or record does not exist."""


class AuthorizationError(DomainError):
    """Raised when the caller lacks permission for an action."""


class DuplicateCheckInError(DomainError):
    """Raised when the staff member already checked in today.

    Callers report this as a benign no-op rather than a failure.
    """


class DeviceConflictError(DomainError):
    """Raised when the device fingerprint does not belong to the staff member."""

    WRONG_DEVICE = "WrongDevice"
    DEVICE_REUSE = "DeviceReuse"

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


class NotificationDeliveryError(DomainError):
    """Raised by notifiers when an e-mail could not be delivered.

    Never propagated past the job that triggered the notification.
    """
