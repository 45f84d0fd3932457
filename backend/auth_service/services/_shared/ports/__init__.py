"""
auth_service.services._shared.ports
===================================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token management and credential infrastructure.

These ports decouple the service layer from concrete implementations
of token signing, password hashing and refresh storage mechanisms.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`, :class:`~.AccessClaims` and the
    :class:`~.TokenError` family: signed access-token issuance and decoding.

- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`: one-way hash + verify.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore` and :class:`~.RefreshTokenRecord`
    for single-use refresh token persistence with expiry.

Design Notes
------------
Concrete adapters (PyJWT, Werkzeug, Redis) live under ``auth_service.infra``.
The in-memory refresh store lives here because it doubles as the default
backend when no Redis URL is configured.
"""

from __future__ import annotations

from .password_hasher import PasswordHasher
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RefreshTokenStore,
    new_refresh_token_id,
)
from .token_codec import (
    AccessClaims,
    ExpiredTokenError,
    InvalidTokenError,
    TokenCodec,
    TokenCodecConfig,
    TokenError,
)

__all__ = [
    "AccessClaims",
    "ExpiredTokenError",
    "InMemoryRefreshTokenStore",
    "InvalidTokenError",
    "PasswordHasher",
    "RefreshTokenRecord",
    "RefreshTokenStore",
    "TokenCodec",
    "TokenCodecConfig",
    "TokenError",
    "new_refresh_token_id",
]
