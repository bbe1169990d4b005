"""Refresh token repository: lookups and revocation state transitions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update

from tokengate.models.refresh_token import RefreshToken
from tokengate.models.user import User
from tokengate.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`.

    Revocation is expressed as conditional ``UPDATE`` statements so the
    ``revoked`` flag can only move from ``False`` to ``True`` and concurrent
    callers cannot both win. Bulk updates skip identity-map synchronization;
    callers that keep entities around must refresh them.
    """

    model = RefreshToken

    def find_usable_with_user(
        self, token_id: str, now: datetime
    ) -> tuple[RefreshToken, User] | None:
        """Return the token and its owner when the token is still usable.

        :param token_id: Opaque refresh token presented by the client.
        :param now: Reference instant for the expiry check.
        :returns: ``(token, user)`` or ``None`` if unknown, revoked or expired.
        """
        stmt = (
            select(RefreshToken, User)
            .join(User, RefreshToken.user_id == User.id)
            .where(
                RefreshToken.id == token_id,
                RefreshToken.revoked.is_(False),
                RefreshToken.expires_at > now,
            )
        )
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        return row[0], row[1]

    def revoke_if_usable(self, token_id: str, now: datetime) -> bool:
        """Atomically revoke ``token_id`` only if it is still usable.

        :returns: ``True`` if this call performed the transition.
        """
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.id == token_id,
                RefreshToken.revoked.is_(False),
                RefreshToken.expires_at > now,
            )
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount == 1

    def revoke(self, token_id: str) -> bool:
        """Revoke ``token_id`` regardless of expiry.

        :returns: ``True`` if a live row changed; ``False`` for unknown or
            already revoked tokens.
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.id == token_id, RefreshToken.revoked.is_(False))
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        return self.session.execute(stmt).rowcount > 0

    def revoke_all_for_user(self, user_id: str) -> int:
        """Revoke every outstanding refresh token owned by ``user_id``.

        :returns: Number of rows revoked.
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.revoked.is_(False))
            .values(revoked=True)
            .execution_options(synchronize_session=False)
        )
        return int(self.session.execute(stmt).rowcount)
