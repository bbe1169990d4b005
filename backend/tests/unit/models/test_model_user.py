"""Unit tests for :class:`tokengate.models.user.User`."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from tests.factories.user import UserFactory
from tokengate.models.user import User, UserRole


class TestUserModel:
    def test_defaults_role_user_and_active(self, session):
        user = User(email="plain@example.com", password_hash="x")
        session.add(user)
        session.commit()

        assert user.role is UserRole.USER
        assert user.is_active is True
        assert user.last_login is None
        assert len(user.id) == 36

    def test_email_is_trimmed_but_case_preserved(self, session):
        user = UserFactory(email="  Mixed.Case@Example.com ")
        assert user.email == "Mixed.Case@Example.com"

    @pytest.mark.parametrize("bad", ["", "no-at-sign", "nobody@localhost"])
    def test_rejects_malformed_email(self, bad):
        with pytest.raises(ValueError):
            User(email=bad, password_hash="x")

    def test_role_accepts_raw_string(self):
        user = User(email="r@example.com", password_hash="x", role="admin")
        assert user.role is UserRole.ADMIN

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError):
            User(email="r@example.com", password_hash="x", role="editor")

    def test_email_unique(self, session):
        UserFactory(email="dup@example.com")
        session.add(User(email="dup@example.com", password_hash="x"))
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()
