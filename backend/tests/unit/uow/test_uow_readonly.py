"""
Unit tests for SQLAlchemyReadOnlyUnitOfWork.

SQLite has no ``SET TRANSACTION READ ONLY``; these cover the ORM guards.
"""

from __future__ import annotations

import pytest

from tests.factories.user import UserFactory
from tokengate.models.user import User


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_allows_reads(self, store):
        user = UserFactory()
        with store.reader() as uow:
            assert uow.users.get_by_email(user.email).id == user.id

    def test_blocks_orm_flush_writes(self, store):
        with store.reader() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(UserFactory.build())
            uow.session.flush()

    def test_disallows_commit(self, store):
        with store.reader() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_discards_changes_on_exit(self, store, session):
        user = UserFactory(first_name="Original")

        with store.reader() as uow:
            loaded = uow.users.get(user.id)
            loaded.first_name = "Mutated"

        with store.reader() as uow:
            assert uow.users.get(user.id).first_name == "Original"

    def test_guard_removed_after_exit(self, store, session):
        with store.reader():
            pass
        # A writer flush after the reader closes must succeed
        with store.transaction() as uow:
            uow.users.add(UserFactory.build())
        assert session.query(User).count() >= 1

    def test_leaves_outer_transaction_untouched(self, store, session):
        """A reader opened inside an active transaction must not roll it back."""
        user = UserFactory.build()
        session.add(user)
        session.flush()

        with store.reader() as uow:
            assert uow.users.get(user.id) is not None

        assert session().in_transaction()
        session.commit()
        assert session.get(User, user.id) is not None
