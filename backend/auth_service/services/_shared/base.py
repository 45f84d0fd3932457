# auth_service/services/_shared/base.py
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime

from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy.exc import SQLAlchemyError

from auth_service.core import errors as api_errors
from auth_service.services._shared.errors import (
    ErrorKind,
    ServiceError,
    ServiceUnavailableError,
)
from auth_service.services._shared.result import Failure
from auth_service.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

log = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Return the current instant as an aware UTC datetime."""
    return datetime.now(UTC)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (request ids, etc.).

    :param request_id: Correlation id for logging/tracing.
    """

    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Provide the service clock.
    * Centralize error translation and store-failure wrapping.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Services are stateless across calls; only read-only collaborators are
      kept on the instance.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None, clock: Clock | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context.
        :type ctx: ServiceContext | None
        :param clock: Source of the current instant (aware UTC).
        :type clock: Callable[[], datetime] | None
        """
        self.ctx = ctx or ServiceContext()
        self._clock = clock or utcnow

    def now_utc(self) -> datetime:
        """Return the service's notion of *now*."""
        return self._clock()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level (e.g. "READ COMMITTED").
        :type isolation: str | None
        :param enforce_db_readonly: Apply `SET TRANSACTION READ ONLY` when supported.
        :type enforce_db_readonly: bool
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    # -------------------------- Store failures ------------------------------

    @contextmanager
    def store_guard(self, operation: str) -> Iterator[None]:
        """
        Convert driver-level failures into :class:`ServiceUnavailableError`.

        Service errors raised inside the block pass through untouched.

        :param operation: Short label used in the log record.
        :type operation: str
        :raises ServiceUnavailableError: On any SQLAlchemy or Redis error.
        """
        try:
            yield
        except ServiceError:
            raise
        except (SQLAlchemyError, RedisError) as exc:
            log.error("store.failure operation=%s error=%s", operation, type(exc).__name__)
            raise ServiceUnavailableError() from exc

    # -------------------------- Error handling ------------------------------

    def translate_failure(self, failure: Failure) -> api_errors.APIError:
        """
        Map a failed :class:`Outcome` to its API-level (HTTP) error.

        :param failure: Failure kind and reason.
        :type failure: Failure
        :returns: Error ready to be raised in a request handler.
        :rtype: APIError
        """
        kind, reason = failure.kind, failure.reason
        if kind is ErrorKind.DUPLICATE_USER:
            return api_errors.Conflict(reason)
        if kind is ErrorKind.USER_NOT_FOUND:
            return api_errors.NotFound(reason)
        if kind is ErrorKind.UNAUTHORIZED:
            return api_errors.Unauthorized(reason)
        if kind is ErrorKind.FORBIDDEN:
            return api_errors.Forbidden(reason)
        if kind is ErrorKind.VALIDATION:
            return api_errors.APIError(reason, status_code=422)
        if kind is ErrorKind.UNAVAILABLE:
            return api_errors.APIError(reason, status_code=503)
        return api_errors.APIError(reason, status_code=500)
