"""Unit tests for :class:`tokengate.models.refresh_token.RefreshToken`."""

from __future__ import annotations

from tests.factories.refresh_token import RefreshTokenFactory
from tests.factories.user import UserFactory


def test_defaults_to_not_revoked(session):
    token = RefreshTokenFactory()
    assert token.revoked is False
    assert token.user.refresh_tokens == [token]


def test_user_owns_many_tokens(session):
    user = UserFactory()
    first = RefreshTokenFactory(user=user)
    second = RefreshTokenFactory(user=user)

    session.expire(user, ["refresh_tokens"])
    assert {t.id for t in user.refresh_tokens} == {first.id, second.id}
    assert repr(first) == f"<RefreshToken id={first.id}>"
