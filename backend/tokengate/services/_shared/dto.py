# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Verified caller identity threaded from the authorization layer to views.

    :param id: User identifier (JWT ``sub``).
    :type id: str
    :param email: User email at verification time.
    :type email: str
    :param role: Current role as stored.
    :type role: str
    """

    id: str
    email: str
    role: str


@dataclass(frozen=True, slots=True)
class SafeUserOut:
    """
    Outward user view; never carries the password hash.

    :param id: User identifier.
    :param email: Login email.
    :param first_name: Optional first name.
    :param last_name: Optional last name.
    :param role: ``user`` or ``admin``.
    :param is_active: Whether the account may authenticate.
    :param last_login: Last successful login, if any.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: str
    email: str
    first_name: str | None
    last_name: str | None
    role: str
    is_active: bool
    last_login: datetime | None
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_model(cls, user) -> SafeUserOut:
        """Build the safe view from a loaded :class:`~tokengate.models.User`."""
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=getattr(user.role, "value", user.role),
            is_active=bool(user.is_active),
            last_login=user.last_login,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
