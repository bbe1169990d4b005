"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside an outer transaction on a shared in-memory SQLite
connection; sessions join it through SAVEPOINTs, so units of work may
commit and roll back freely while nothing leaks between cases.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from tokengate.core.extensions import db as _db  # Flask-SQLAlchemy instance
from tokengate.factory import create_app  # application factory under test
from tokengate.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from tokengate.services._shared.ports import StubTokenProvider
from tokengate.uow import CredentialStore

TEST_PASSWORD = "Passw0rd!"

# Cheap work factor keeps the suite fast; production uses the config value
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


def _enable_sqlite_savepoints(engine) -> None:
    """Let pysqlite honour SAVEPOINT by taking over transaction control."""

    @event.listens_for(engine, "connect")
    def _do_connect(dbapi_connection, connection_record):  # pragma: no cover - glue
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _do_begin(conn):  # pragma: no cover - glue
        conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application built from ``TestingConfig`` with logging noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("REDIS_URL", None)
    app = create_app("testing")
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        if _db.engine.url.get_backend_name() == "sqlite":
            _enable_sqlite_savepoints(_db.engine)
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(app, db, connection):
    """Provide a scoped session joined to a per-test outer transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Session whose ``commit()`` only releases a SAVEPOINT; the outer
        transaction is rolled back after each test.

    Notes
    -----
    ``db.session`` is swapped for this session so that the app (and the
    ``CredentialStore`` the factory registers) uses it.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(
        bind=connection,
        join_transaction_mode="create_savepoint",
        autoflush=False,
        expire_on_commit=False,
    )
    scoped = scoped_session(SessionFactory)

    original_session = db.session
    db.session.remove()
    db.session = scoped

    ctx = app.test_request_context()
    ctx.push()
    try:
        yield scoped
    finally:
        ctx.pop()
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture()
def store(session) -> CredentialStore:
    """Store handle bound to the transactional test session."""
    return CredentialStore(lambda: session)


@pytest.fixture(scope="session")
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(method=FAST_HASH_METHOD)


@pytest.fixture()
def token_provider() -> StubTokenProvider:
    return StubTokenProvider()


@pytest.fixture()
def client(app, session):
    """Flask test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(request):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    if "session" in request.fixturenames or "client" in request.fixturenames:
        SQLAlchemySession.set(request.getfixturevalue("session"))
    yield
    SQLAlchemySession.set(None)
