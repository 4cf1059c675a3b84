from abc import ABC
from typing import ClassVar


class UserError(ABC, Exception):
    """Error whose message is shown to the caller as is.

    Subclasses carry the HTTP status and machine-readable type used in the
    failure envelope. Messages must not leak internal details.
    """

    status_code: ClassVar[int] = 400
    error_type: ClassVar[str] = "bad_request"


class AuthenticationError(UserError):
    """The caller's identity is missing or cannot be resolved."""

    status_code = 401
    error_type = "authentication_error"

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """The caller is known but may not perform the operation."""

    status_code = 403
    error_type = "access_denied"


class NotFoundError(UserError):
    """A task, comment, user or notification does not exist."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class ValidationError(UserError):
    status_code = 400
    error_type = "validation_error"


class PersistenceError(Exception):
    """A store write reported failure. Answered with 500."""

    def __init__(self, message: str = "Failed to persist changes") -> None:
        super().__init__(message)


class NotificationError(Exception):
    """A single notification could not be stored. Never reaches the HTTP caller."""
