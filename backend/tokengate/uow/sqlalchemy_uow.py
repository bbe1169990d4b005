"""
SQLAlchemy implementation of UnitOfWork plus the injectable store handle.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, scoped_session

from tokengate.repositories import RefreshTokenRepository, UserRepository
from tokengate.uow.base import UnitOfWork

log = logging.getLogger(__name__)

SessionProvider = Callable[[], Session]


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.refresh_tokens = RefreshTokenRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write unit of work: commit on success, rollback and re-raise on error.

    The same session is shared across all repositories for a consistent
    transaction.
    """

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # No-op: the session autobegins on the first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only unit of work.

    This UoW:
    - Blocks ORM flushes of new/dirty/deleted objects while open.
    - Applies ``SET TRANSACTION READ ONLY`` on PostgreSQL/MySQL when it owns
      the transaction.
    - Rolls back on exit only when it started the transaction itself, so an
      outer transaction (e.g. an enclosing test fixture) is left untouched.
    - Disallows ``commit()``.
    """

    _READ_ONLY_DIALECTS = ("postgresql", "mysql", "mariadb")

    def __init__(self, *, session: Session) -> None:
        super().__init__(session=session)
        self._owns_transaction = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._owns_transaction = not self.session.in_transaction()
        event.listen(self.session, "before_flush", self._block_flush)
        if self._owns_transaction:
            conn = self.session.connection()
            if conn.dialect.name in self._READ_ONLY_DIALECTS:
                try:
                    self.session.execute(text("SET TRANSACTION READ ONLY"))
                except SQLAlchemyError as exc:
                    log.warning("SET TRANSACTION READ ONLY failed (%s); guards only.", exc)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owns_transaction:
                self.session.rollback()
        finally:
            with suppress(Exception):
                event.remove(self.session, "before_flush", self._block_flush)
            self._owns_transaction = False

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    @staticmethod
    def _block_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )


class CredentialStore:
    """
    Explicit store handle handed to services at construction time.

    :param session_provider: Zero-argument callable returning the session to
        use for the next unit of work. The app factory passes the
        Flask-SQLAlchemy scoped session; tests pass their transactional one.

    Usage::

        store = CredentialStore(lambda: db.session)
        with store.transaction() as uow:
            uow.users.add(user)
    """

    def __init__(self, session_provider: SessionProvider) -> None:
        self._session_provider = session_provider

    @property
    def session(self) -> Session:
        """Resolve the concrete session, unwrapping a ``scoped_session`` registry."""
        session = self._session_provider()
        if isinstance(session, scoped_session):
            return session()
        return session

    def transaction(self) -> SQLAlchemyUnitOfWork:
        """Open an atomic scope: any error inside rolls back and re-raises."""
        return SQLAlchemyUnitOfWork(session=self.session)

    def reader(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Open a read-only scope."""
        return SQLAlchemyReadOnlyUnitOfWork(session=self.session)
