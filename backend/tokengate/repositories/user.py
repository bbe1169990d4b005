"""User repository for credential lookups and account updates."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import select

from tokengate.models.user import User
from tokengate.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER hashes or verifies passwords and never issues tokens; it only
    stores what the services hand over.
    """

    model = User

    def _updatable_fields(self):
        """Profile fields a user may change (never password, role or status)."""
        return {"email", "first_name", "last_name"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by exact email.

        :param email: Email address as stored (trimmed only).
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when a user with the provided email exists."""
        stmt = select(User.id).where(User.email == email.strip())
        return self.session.execute(stmt.limit(1)).first() is not None

    def email_taken_by_other(self, email: str, user_id: str) -> bool:
        """Return ``True`` if ``email`` belongs to a user other than ``user_id``."""
        stmt = select(User.id).where(User.email == email.strip(), User.id != user_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Mutations ----------------------------

    def update_password(self, user: User, password_hash: str) -> None:
        """Store an already computed password hash and flush.

        :param user: Loaded user entity.
        :param password_hash: Output of the password hasher.
        """
        user.password_hash = password_hash
        self.flush()

    def touch_last_login(self, user: User, when: datetime) -> None:
        """Stamp ``last_login`` after a successful authentication."""
        user.last_login = when
        self.flush()
