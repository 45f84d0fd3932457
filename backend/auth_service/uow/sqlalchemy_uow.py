"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from contextlib import suppress

from flask import current_app
from sqlalchemy import event, text
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction, scoped_session

from auth_service.core.extensions import db
from auth_service.repositories import UserRepository
from auth_service.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    Commits on clean exit, rolls back when the block raises.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # No-op: the session is lazily started on the first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    - Blocks ORM flushes that would write (``before_flush`` guard).
    - Applies ``SET TRANSACTION READ ONLY`` / isolation level on dialects
      that support it, when the UoW owns the transaction.
    - Rolls back on exit when it owns the transaction; otherwise attaches to
      the caller's transaction and leaves it untouched.
    - Disallows ``commit()``.

    :param isolation_level: Optional isolation hint (``"READ COMMITTED"``...).
    :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
    """

    _TX_DIALECTS = ("postgresql", "mysql", "mariadb")

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._txn_ctx: SessionTransaction | None = None
        self._guard_installed: Session | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._txn_ctx = None
        try:
            txn_ctx = self.session.begin()
            txn_ctx.__enter__()
            self._txn_ctx = txn_ctx
        except InvalidRequestError:
            # A transaction is already open on this session (autobegin / test
            # fixture): attach to it without SET TRANSACTION directives.
            pass

        self._install_guard()

        if self._txn_ctx is not None:
            dialect = self.session.connection().dialect.name
            if dialect in self._TX_DIALECTS:
                try:
                    if self.isolation_level:
                        iso = self.isolation_level.upper().strip()
                        self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {iso}"))
                    if self.enforce_db_readonly:
                        self.session.execute(text("SET TRANSACTION READ ONLY"))
                except SQLAlchemyError as exc:
                    current_app.logger.warning(
                        "SET TRANSACTION directives failed (%s). Falling back to guards-only.", exc
                    )
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._txn_ctx is not None:
                with suppress(Exception):
                    self.session.rollback()
                try:
                    self._txn_ctx.__exit__(exc_type, exc, tb)
                finally:
                    self._txn_ctx = None
        finally:
            self._remove_guard()

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guard ----------------------------------

    def _before_flush(self, session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )

    def _guard_target(self) -> Session:
        # Listen on the thread-local Session, not the scoped_session registry
        # (which would install the guard for every thread).
        session = self.session
        return session() if isinstance(session, scoped_session) else session

    def _install_guard(self) -> None:
        if self._guard_installed is not None:
            return
        target = self._guard_target()
        event.listen(target, "before_flush", self._before_flush)
        self._guard_installed = target

    def _remove_guard(self) -> None:
        if self._guard_installed is None:
            return
        with suppress(Exception):
            event.remove(self._guard_installed, "before_flush", self._before_flush)
        self._guard_installed = None
