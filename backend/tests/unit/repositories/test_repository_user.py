"""Unit tests for UserRepository."""

import pytest

from auth_service.repositories.user import UserRepository
from tests.factories.user import UserAccountFactory


class TestUserRepository:
    """Ensure ``UserRepository`` performs exact-match persistence operations."""

    @pytest.fixture()
    def repo(self):
        return UserRepository()

    def test_create_assigns_id_and_normalizes_roles(self, repo, session):
        account = repo.create(
            username="alice@example.com", password_hash="hash", roles=["user", "admin", "user"]
        )
        assert account.id
        assert account.roles == ["admin", "user"]

    def test_create_without_roles(self, repo, session):
        account = repo.create(username="plain@example.com", password_hash="hash")
        assert account.roles == []

    def test_get_by_username_is_exact(self, repo, session):
        account = UserAccountFactory(username="Bob@example.com")

        assert repo.get_by_username("Bob@example.com").id == account.id
        assert repo.get_by_username("bob@example.com") is None
        assert repo.get_by_username("Bob@example.com ") is None

    def test_exists_by_username(self, repo, session):
        UserAccountFactory(username="carol@example.com")

        assert repo.exists_by_username("carol@example.com")
        assert not repo.exists_by_username("nobody@example.com")

    def test_get_by_id(self, repo, session):
        account = UserAccountFactory()

        assert repo.get(account.id) is account
        assert repo.get("0" * 32) is None
