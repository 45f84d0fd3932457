"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. They serve as stable contracts between
repositories, ports and application services.

Every concrete error carries an :class:`ErrorKind` tag and a single
human-readable ``reason``. The translation to HTTP responses (RFC 7807) is
handled by ``auth_service/core/errors.py`` via
``BaseService.translate_failure()``.
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Supports PostgreSQL (constraint name lookup) and falls back to the
    SQLite wording (``UNIQUE constraint failed: <table>.<column>``).

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :type exc: IntegrityError
    :param constraint_name: Constraint name (e.g. ``uq_user_accounts_username``)
        or ``table.column`` pair.
    :type constraint_name: str
    :returns: ``True`` if the IntegrityError matches the given constraint.
    :rtype: bool
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


class ErrorKind(Enum):
    """Closed set of failure kinds surfaced by the credential core."""

    DUPLICATE_USER = "duplicate_user"
    USER_NOT_FOUND = "user_not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    VALIDATION = "validation_error"
    UNAVAILABLE = "service_unavailable"
    INTERNAL = "internal_error"


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - Subclasses pin ``kind`` and a default ``reason``; callers may override
      the reason but never the kind.
    - The API layer or BaseService will later translate them to APIError.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_reason: str = "Unexpected error"

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason or self.default_reason
        super().__init__(self.reason)

    def __str__(self) -> str:
        return self.reason


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class DuplicateUserError(ServiceError):
    """Raised when registering a username that already exists."""

    kind = ErrorKind.DUPLICATE_USER
    default_reason = "User with the same username already exists"


class UserNotFoundError(ServiceError):
    """Raised when an account expected to exist cannot be found."""

    kind = ErrorKind.USER_NOT_FOUND
    default_reason = "User not found"


class UnauthorizedError(ServiceError):
    """
    Raised on bad credentials, invalid/expired tokens or claim mismatches.
    """

    kind = ErrorKind.UNAUTHORIZED
    default_reason = "Unauthorized"


class ForbiddenError(ServiceError):
    """Raised when a valid token lacks every required role."""

    kind = ErrorKind.FORBIDDEN
    default_reason = "Insufficient roles"


class InputValidationError(ServiceError):
    """Raised when an operation receives malformed input."""

    kind = ErrorKind.VALIDATION
    default_reason = "Validation failed"


class ServiceUnavailableError(ServiceError):
    """Raised when a backing store fails (timeouts, connectivity, ...)."""

    kind = ErrorKind.UNAVAILABLE
    default_reason = "Credential store unavailable"


class InternalServiceError(ServiceError):
    """Raised when a collaborator fails in a way the caller cannot fix."""

    kind = ErrorKind.INTERNAL
    default_reason = "Internal error"
