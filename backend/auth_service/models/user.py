"""User account model backing the credential store."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy import JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from auth_service.core.extensions import db

from .base import OpaqueIdMixin, ReprMixin, TimestampMixin


def normalize_roles(roles: Iterable[str] | None) -> list[str]:
    """Deduplicate and sort a role collection (``None`` -> empty)."""
    if roles is None:
        return []
    if isinstance(roles, str):
        raise ValueError("Roles must be a collection of strings, not a string.")
    out = set()
    for role in roles:
        if not isinstance(role, str) or not role:
            raise ValueError("Each role must be a non-empty string.")
        out.add(role)
    return sorted(out)


class UserAccount(OpaqueIdMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity.

    Fields
    ------
    id : str
        Opaque identifier assigned on insert.
    username : str
        Email-shaped login name. Matched exactly (case-sensitive), never
        normalized.
    password_hash : str
        Output of the configured password hasher; never the plaintext.
    roles : list[str]
        Role names, stored deduplicated and sorted.
    created_at : datetime
        Creation timestamp (from mixin).
    updated_at : datetime
        Update timestamp (from mixin).
    """

    __tablename__ = "user_accounts"

    username: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    roles: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    __table_args__ = (UniqueConstraint("username", name="uq_user_accounts_username"),)

    # -------------------- Convenience --------------------
    @property
    def role_set(self) -> frozenset[str]:
        """Roles as an immutable set."""
        return frozenset(self.roles or ())

    # -------------------- Validators --------------------
    @validates("username")
    def _validate_username(self, key: str, value: str) -> str:
        """
        Reject empty usernames.

        :raises ValueError: If username is missing or only whitespace.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Username is required.")
        return value

    @validates("roles")
    def _validate_roles(self, key: str, value: Any) -> list[str]:
        return normalize_roles(value)
