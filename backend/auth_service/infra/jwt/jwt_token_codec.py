# auth_service/infra/jwt/jwt_token_codec.py
from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import jwt

from auth_service.services._shared.ports import (
    AccessClaims,
    ExpiredTokenError,
    InvalidTokenError,
    TokenCodec,
    TokenCodecConfig,
)

REQUIRED_CLAIMS = ("sub", "username", "roles", "iat", "exp")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(slots=True)
class JWTTokenCodec(TokenCodec):
    """
    HMAC-signed JWT codec backed by PyJWT.

    The signing key arrives through :class:`TokenCodecConfig`; nothing is read
    from process-wide state. Expiry is checked against ``clock`` rather than
    PyJWT's wall clock so callers can control time.

    :param config: Key material, algorithm and access window.
    :param clock: Source of the current instant (aware UTC).
    """

    config: TokenCodecConfig
    clock: Callable[[], datetime] = field(default=_utcnow)

    def issue(self, subject: str, roles: Iterable[str], username: str) -> str:
        if not subject:
            raise ValueError("Token subject must be a non-empty string.")
        issued_at = int(self.clock().timestamp())
        expires_at = issued_at + int(self.config.access_ttl.total_seconds())
        payload = {
            "sub": subject,
            "username": username,
            "roles": sorted(set(roles or ())),
            "iat": issued_at,
            "exp": expires_at,
        }
        return jwt.encode(payload, self.config.secret, algorithm=self.config.algorithm)

    def decode(self, token: str) -> AccessClaims:
        try:
            payload = jwt.decode(
                token,
                self.config.secret,
                algorithms=[self.config.algorithm],
                # exp/iat are validated below against the injected clock
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": list(REQUIRED_CLAIMS),
                },
            )
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        claims = self._to_claims(payload)
        if claims.expires_at < self.clock():
            raise ExpiredTokenError("Token has expired")
        return claims

    # ------------------------------------------------------------------ #
    # Claim schema
    # ------------------------------------------------------------------ #

    @staticmethod
    def _to_claims(payload: dict[str, Any]) -> AccessClaims:
        """Validate the decoded payload against the fixed claim schema."""
        sub = payload.get("sub")
        username = payload.get("username")
        roles = payload.get("roles")
        iat = payload.get("iat")
        exp = payload.get("exp")

        if not isinstance(sub, str) or not sub:
            raise InvalidTokenError("Claim 'sub' must be a non-empty string")
        if not isinstance(username, str):
            raise InvalidTokenError("Claim 'username' must be a string")
        if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
            raise InvalidTokenError("Claim 'roles' must be a list of strings")
        if not _is_int(iat) or not _is_int(exp):
            raise InvalidTokenError("Claims 'iat' and 'exp' must be integers")

        try:
            issued_at = datetime.fromtimestamp(iat, tz=UTC)
            expires_at = datetime.fromtimestamp(exp, tz=UTC)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidTokenError("Claims 'iat' and 'exp' are out of range") from exc

        return AccessClaims(
            subject=sub,
            username=username,
            roles=frozenset(roles),
            issued_at=issued_at,
            expires_at=expires_at,
        )
