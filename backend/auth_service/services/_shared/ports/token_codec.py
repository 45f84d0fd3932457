from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol


class TokenError(Exception):
    """Base class for access-token decoding failures."""


class InvalidTokenError(TokenError):
    """Signature does not verify, token is malformed or claims are off-schema."""


class ExpiredTokenError(TokenError):
    """Token verified but its expiry instant is in the past."""


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """
    Structured payload embedded in an access token.

    :ivar subject: Account id the token was issued for.
    :ivar username: Username snapshot at issuance.
    :ivar roles: Role set snapshot at issuance.
    :ivar issued_at: Issuance instant (UTC, whole seconds).
    :ivar expires_at: Expiry instant (UTC, whole seconds).
    """

    subject: str
    username: str
    roles: frozenset[str]
    issued_at: datetime
    expires_at: datetime

    def has_any_role(self, required: Iterable[str]) -> bool:
        """Return ``True`` when at least one of ``required`` is held."""
        return not self.roles.isdisjoint(required)


@dataclass(frozen=True, slots=True)
class TokenCodecConfig:
    """
    Signing configuration for the token codec.

    :param secret: Symmetric signing key.
    :type secret: str
    :param algorithm: JWS algorithm (HMAC family).
    :type algorithm: str
    :param access_ttl: Fixed validity window of access tokens.
    :type access_ttl: timedelta
    """

    secret: str
    algorithm: str = "HS256"
    access_ttl: timedelta = timedelta(minutes=5)


class TokenCodec(Protocol):
    """Port for issuing and decoding signed access tokens."""

    def issue(self, subject: str, roles: Iterable[str], username: str) -> str:
        """Sign a token for ``subject`` valid for the configured window."""
        ...

    def decode(self, token: str) -> AccessClaims:
        """
        Verify ``token`` and rebuild its claims.

        :raises InvalidTokenError: On bad signature, malformed token or schema mismatch.
        :raises ExpiredTokenError: When the expiry instant has passed.
        """
        ...
