"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases.
"""

from __future__ import annotations

import os

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from auth_service.core.config import TestingConfig
from auth_service.core.extensions import db as _db  # Flask-SQLAlchemy instance
from auth_service.factory import create_app  # application factory under test
from auth_service.infra.jwt.jwt_token_codec import JWTTokenCodec
from auth_service.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from auth_service.services._shared.ports import InMemoryRefreshTokenStore, TokenCodecConfig
from auth_service.services.credentials.service import CredentialService
from tests.helpers.utils import FrozenClock

FAST_HASH_METHOD = "pbkdf2:sha256:1000"


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database and the in-process refresh store.
    - Uses a fast password hash.
    - Avoids hitting external services.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    REDIS_URL = None
    USE_PROXYFIX = False
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("REDIS_URL", None)
    app = create_app(TestConfig, instance_relative_config=False)
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
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; automatically rolled
        back after each test.

    Notes
    -----
    Begins a top-level transaction, starts a SAVEPOINT per test, and
    reinstalls the SAVEPOINT whenever SQLAlchemy ends one. Unit of Work
    commits and rollbacks therefore only touch savepoints.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)

    nested = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def client(app):
    """Flask test client sharing the transactional session."""
    return app.test_client()


# -- Credential collaborators wired to a controllable clock -------------------
@pytest.fixture()
def clock():
    """Frozen UTC clock shared by the codec, the store and the service."""
    return FrozenClock()


@pytest.fixture()
def codec(clock):
    """JWT codec signing with the testing key."""
    return JWTTokenCodec(
        config=TokenCodecConfig(secret=TestConfig.JWT_SECRET_KEY),
        clock=clock,
    )


@pytest.fixture()
def hasher():
    """Fast Werkzeug hasher."""
    return WerkzeugPasswordHasher(method=FAST_HASH_METHOD)


@pytest.fixture()
def refresh_store(clock):
    """Empty in-process refresh token store."""
    return InMemoryRefreshTokenStore(clock=clock)


@pytest.fixture()
def service(codec, hasher, refresh_store, clock):
    """CredentialService over in-memory doubles and the transactional session."""
    return CredentialService(
        token_codec=codec,
        password_hasher=hasher,
        refresh_store=refresh_store,
        clock=clock,
    )


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import bind_session

    bind_session(session)
    yield
    bind_session(None)
