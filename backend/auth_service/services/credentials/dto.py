# auth_service/services/credentials/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthResult:
    """
    Outcome of login, refresh and validation.

    Validation fills only ``user_id``. ``roles`` is kept as given; the wire
    schema omits it when empty or ``None``.

    :param access_token: Encoded access JWT.
    :type access_token: str | None
    :param refresh_token: Opaque refresh token id.
    :type refresh_token: str | None
    :param user_id: Account id.
    :type user_id: str | None
    :param roles: Sorted role names.
    :type roles: tuple[str, ...] | None
    """

    access_token: str | None = None
    refresh_token: str | None = None
    user_id: str | None = None
    roles: tuple[str, ...] | None = None


# ------------------------ Config DTO --------------------------------------- #


@dataclass(frozen=True, slots=True)
class CredentialConfig:
    """
    Refresh token lifetime. The access window belongs to the token codec.

    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    refresh_expires: timedelta = timedelta(minutes=15)
