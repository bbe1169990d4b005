"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or
HTTP. They serve as stable contracts between repositories and application
services. Their messages are client-safe by construction.

The translation to HTTP responses is handled by ``tokengate/core/errors.py``
via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.

    Notes
    -----
    PostgreSQL includes the constraint name in the message; SQLite reports
    the offending columns instead (``UNIQUE constraint failed: users.email``),
    so the ``<table>.<column>`` form derived from the naming convention is
    accepted as well.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    if constraint_name.lower() in message:
        return True
    # uq_<table>_<column> -> "<table>.<column>"
    prefix, _, rest = constraint_name.partition("_")
    if prefix != "uq" or "_" not in rest:
        return False
    table, _, column = rest.partition("_")
    return f"{table}.{column}".lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them to ``APIError`` subclasses.
    """

    default_message = "Service error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True, eq=False)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key (kept for logs, not rendered).
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found"


@dataclass(slots=True, eq=False)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Client-facing explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return self.detail


class InvalidCredentialsError(ServiceError):
    """Unknown email or wrong password; both render the same message."""

    default_message = "Invalid email or password"


class AccountInactiveError(ServiceError):
    """The account exists but has been deactivated."""

    default_message = "Account is inactive"


class InvalidOrExpiredTokenError(ServiceError):
    """The presented refresh token is unknown, revoked or expired."""

    default_message = "Invalid or expired refresh token"


class TokenIssuanceError(ServiceError):
    """A refresh token could not be persisted."""

    default_message = "Failed to generate refresh token"


class InternalServiceError(ServiceError):
    """Unexpected store failure wrapped with a safe, operation-level message."""

    default_message = "Internal server error"
