"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

import redis  # type: ignore[import-untyped]
from flask import Flask, current_app
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

from auth_service.infra.jwt.jwt_token_codec import JWTTokenCodec
from auth_service.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from auth_service.infra.security.werkzeug_password_hasher import WerkzeugPasswordHasher
from auth_service.services._shared.ports import (
    InMemoryRefreshTokenStore,
    PasswordHasher,
    RefreshTokenStore,
    TokenCodec,
    TokenCodecConfig,
)

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)

CREDENTIALS_EXTENSION = "credentials"


@dataclass(frozen=True, slots=True)
class CredentialComponents:
    """Read-only collaborators shared by every credential service instance."""

    token_codec: TokenCodec
    password_hasher: PasswordHasher
    refresh_store: RefreshTokenStore
    refresh_ttl: timedelta


def _build_refresh_store(app: Flask) -> RefreshTokenStore:
    """Pick Redis when ``REDIS_URL`` is configured, else the in-process store."""
    redis_url = app.config.get("REDIS_URL")
    if not redis_url:
        app.logger.info("refresh_store.backend=memory")
        return InMemoryRefreshTokenStore()

    client = redis.Redis.from_url(redis_url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {redis_url!r}") from exc
    app.extensions["redis_client"] = client
    app.logger.info("refresh_store.backend=redis")
    return RedisRefreshTokenStore(r=client)


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations and the credential collaborators.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`auth_service.models` package to ensure SQLAlchemy metadata is
        ready for migrations.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from auth_service import models as _models  # noqa: F401

    migrate.init_app(app, db)

    codec = JWTTokenCodec(
        config=TokenCodecConfig(
            secret=app.config["JWT_SECRET_KEY"],
            algorithm=app.config.get("JWT_ALGORITHM", "HS256"),
            access_ttl=timedelta(seconds=int(app.config.get("ACCESS_TOKEN_TTL_SECONDS", 300))),
        )
    )
    app.extensions[CREDENTIALS_EXTENSION] = CredentialComponents(
        token_codec=codec,
        password_hasher=WerkzeugPasswordHasher(
            method=app.config.get("PASSWORD_HASH_METHOD", "scrypt")
        ),
        refresh_store=_build_refresh_store(app),
        refresh_ttl=timedelta(seconds=int(app.config.get("REFRESH_TOKEN_TTL_SECONDS", 900))),
    )


def get_credential_components(app: Flask | None = None) -> CredentialComponents:
    """Return the collaborators registered by :func:`init_app`."""
    target = app or current_app
    components = target.extensions.get(CREDENTIALS_EXTENSION)
    if components is None:
        raise RuntimeError("Credential components are not initialized. Call init_app() first.")
    return components
