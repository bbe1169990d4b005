"""Persisted, revocable refresh token."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tokengate.core.extensions import db

from .base import ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class RefreshToken(ReprMixin, TimestampMixin, db.Model):
    """
    Opaque refresh credential owned by a :class:`User`.

    The primary key *is* the bearer value handed to clients; it is a random
    URL-safe string, never a JWT. A row is usable iff ``revoked`` is false and
    ``expires_at`` lies in the future. ``revoked`` only ever moves from
    ``False`` to ``True``.
    """

    __tablename__ = "refresh_tokens"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    user: Mapped[User] = relationship(back_populates="refresh_tokens")

    __table_args__ = (Index("ix_refresh_tokens_user_id", "user_id"),)
