"""Tests for the UserAccount model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from auth_service.models.user import UserAccount, normalize_roles


class TestUserAccount:
    def test_id_is_assigned_on_flush(self, session):
        account = UserAccount(username="a@example.com", password_hash="h")
        assert account.id is None
        session.add(account)
        session.flush()
        assert isinstance(account.id, str)
        assert len(account.id) == 32

    def test_roles_are_deduplicated_and_sorted(self):
        account = UserAccount(username="r@example.com", password_hash="h", roles=["b", "a", "b"])
        assert account.roles == ["a", "b"]
        assert account.role_set == frozenset({"a", "b"})

    def test_roles_none_becomes_empty(self, session):
        account = UserAccount(username="n@example.com", password_hash="h", roles=None)
        session.add(account)
        session.flush()
        assert account.roles == []

    def test_username_unique(self, session):
        session.add(UserAccount(username="bob@example.com", password_hash="h"))
        session.flush()

        session.add(UserAccount(username="bob@example.com", password_hash="h2"))
        with pytest.raises(IntegrityError):
            session.flush()

    def test_username_is_case_sensitive(self, session):
        session.add(UserAccount(username="Case@example.com", password_hash="h"))
        session.add(UserAccount(username="case@example.com", password_hash="h"))
        session.flush()

    def test_empty_username_rejected(self):
        with pytest.raises(ValueError):
            UserAccount(username="  ", password_hash="h")


@pytest.mark.parametrize(
    "roles",
    ["admin", ["admin", ""], ["admin", 3]],
)
def test_normalize_roles_rejects_malformed(roles):
    with pytest.raises(ValueError):
        normalize_roles(roles)
