import pytest

from auth_service.models.user import UserAccount
from auth_service.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from auth_service.uow import SQLAlchemyUnitOfWork as RWuow
from tests.factories.user import UserAccountFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, session):
        """
        Flushing ORM changes inside the RO UoW raises.
        """
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(UserAccountFactory.build())
            uow.session.flush()

    def test_allows_reads(self, session):
        with RWuow() as uow:
            uow.users.add(UserAccountFactory.build(username="reader@example.com"))

        with ROuow() as uow:
            assert uow.session.query(UserAccount).count() >= 1
            assert uow.users.exists_by_username("reader@example.com")

    def test_disallows_commit(self, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_guard_is_removed_on_exit(self, session):
        """
        Writes are possible again once the RO scope is left.
        """
        with ROuow():
            pass

        with RWuow() as uow:
            uow.users.add(UserAccountFactory.build(username="after-ro@example.com"))
        assert session.query(UserAccount).filter_by(username="after-ro@example.com").count() == 1

    def test_attempted_mutation_is_not_persisted(self, session):
        with RWuow() as uow:
            account = UserAccountFactory.build(username="keep@example.com")
            uow.users.add(account)
            account_id = account.id

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            loaded = uow.session.get(UserAccount, account_id)
            loaded.username = "mutated@example.com"
            uow.session.flush()

        session.rollback()
        with RWuow() as uow:
            assert uow.users.get(account_id).username == "keep@example.com"
