"""Error taxonomy for account and authentication operations.

Every account operation either returns its result or raises exactly one
``AccountError`` subclass. ``kind`` tags the failure for the HTTP edge,
``message`` is safe to show to callers, and ``reason`` is kept for logs only.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Failure categories an account operation can end in."""

    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    UNAVAILABLE = "unavailable"


class AccountError(Exception):
    """Base class for all account operation failures."""

    kind: ErrorKind = ErrorKind.UNAVAILABLE
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, reason: str | None = None):
        self.message = message or self.default_message
        self.reason = reason
        super().__init__(self.message)


class ConflictError(AccountError):
    kind = ErrorKind.CONFLICT
    default_message = "User with this email already exists"


class InvalidCredentialsError(AccountError):
    """Bad email or password. The message never says which one."""

    kind = ErrorKind.UNAUTHORIZED
    default_message = "Invalid email or password"


class UnauthenticatedError(AccountError):
    kind = ErrorKind.UNAUTHENTICATED
    default_message = "Access token required"


class MissingTokenError(UnauthenticatedError):
    """No usable ``Authorization: Bearer`` header on the request."""


class InvalidTokenError(UnauthenticatedError):
    """A bearer token was presented but did not verify."""

    default_message = "Invalid or expired token"


class ForbiddenError(AccountError):
    kind = ErrorKind.FORBIDDEN
    default_message = "You can only update your own profile"


class NotFoundError(AccountError):
    kind = ErrorKind.NOT_FOUND
    default_message = "User not found"


class BadRequestError(AccountError):
    kind = ErrorKind.BAD_REQUEST
    default_message = "No valid fields to update"


class UnavailableError(AccountError):
    kind = ErrorKind.UNAVAILABLE
    default_message = "Service temporarily unavailable"
