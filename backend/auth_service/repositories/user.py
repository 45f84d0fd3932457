"""User account repository (the credential store)."""

from __future__ import annotations

from collections.abc import Iterable
from typing import cast

from sqlalchemy import select

from auth_service.models.user import UserAccount
from auth_service.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserAccount]):
    """Persistence-only repository for :class:`UserAccount`.

    Lookups are exact matches: usernames are compared case-sensitively and
    never normalised. This repository never hashes passwords nor issues
    tokens.
    """

    model = UserAccount

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username(self, username: str) -> UserAccount | None:
        """Fetch an account by exact username.

        :param username: Username to search.
        :type username: str
        :returns: Account or ``None`` when not found.
        :rtype: UserAccount | None
        """
        stmt = select(UserAccount).where(UserAccount.username == username)
        result = self.session.execute(stmt).scalars().first()
        return cast(UserAccount | None, result)

    def exists_by_username(self, username: str) -> bool:
        """Return ``True`` when an account with ``username`` exists."""
        stmt = select(UserAccount.id).where(UserAccount.username == username)
        return bool(self.session.execute(stmt).first())

    # ---------------------------- Writes ----------------------------

    def create(
        self, *, username: str, password_hash: str, roles: Iterable[str] | None = None
    ) -> UserAccount:
        """Insert a new account and flush so the store assigns its id.

        :param username: Unique username.
        :param password_hash: Already-hashed password.
        :param roles: Role names (``None`` -> empty).
        :returns: The persisted account.
        :rtype: UserAccount
        """
        account = UserAccount(
            username=username,
            password_hash=password_hash,
            roles=roles,
        )
        return self.add(account)
