# auth_service/services/credentials/service.py
from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError

from auth_service.repositories.user import UserRepository
from auth_service.services._shared.base import BaseService, Clock, ServiceContext
from auth_service.services._shared.errors import (
    DuplicateUserError,
    ForbiddenError,
    InputValidationError,
    InternalServiceError,
    UnauthorizedError,
    UserNotFoundError,
    violates,
)
from auth_service.services._shared.ports import (
    ExpiredTokenError,
    InvalidTokenError,
    PasswordHasher,
    RefreshTokenRecord,
    RefreshTokenStore,
    TokenCodec,
)
from auth_service.services.credentials.dto import AuthResult, CredentialConfig

log = logging.getLogger(__name__)

INVALID_TOKEN = "Invalid or expired token"
USER_NOT_PRESENT = "Provided User is not present"
USER_DETAILS_MISMATCH = "Invalid User details provided"
INVALID_REFRESH_TOKEN = "Invalid refresh token"
REFRESH_TOKEN_EXPIRED = "Refresh token expired"

_USERNAME_CONSTRAINTS = ("uq_user_accounts_username", "user_accounts.username")


class CredentialService(BaseService):
    """
    Credential lifecycle service (register / login / validate / refresh).

    Access tokens are issued and verified through a :class:`TokenCodec`;
    refresh tokens are opaque single-use records kept in a
    :class:`RefreshTokenStore`. The service itself holds no mutable state,
    so one instance may be shared across request threads.
    """

    def __init__(
        self,
        *,
        token_codec: TokenCodec,
        password_hasher: PasswordHasher,
        refresh_store: RefreshTokenStore,
        cfg: CredentialConfig | None = None,
        clock: Clock | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its collaborators.

        :param token_codec: Adapter signing and decoding access tokens.
        :param password_hasher: One-way password hasher.
        :param refresh_store: Keyed store for refresh token records.
        :param cfg: Refresh token lifetime.
        :param clock: Source of the current instant (aware UTC).
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx, clock=clock)
        self.tokens = token_codec
        self.hasher = password_hasher
        self.refresh_store = refresh_store
        self.cfg = cfg or CredentialConfig()

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(
        self, username: str, password: str, roles: Iterable[str] | None = None
    ) -> None:
        """
        Create an account after checking that the username is free.

        :param username: Unique username (exact match).
        :param password: Raw password, hashed before persistence.
        :param roles: Optional role names; ``None`` means no roles.
        :raises DuplicateUserError: If the username is already taken.
        :raises InputValidationError: If the username, password or roles are malformed.
        """
        with self.store_guard("register.lookup"), self.ro_uow() as uow:
            taken = uow.users.exists_by_username(username)
        if taken:
            log.warning("register.rejected reason=duplicate_user")
            raise DuplicateUserError()

        password_hash = self._hash(password)

        with self.store_guard("register.insert"):
            try:
                with self.rw_uow() as uow:
                    repo: UserRepository = uow.users
                    account = repo.create(
                        username=username, password_hash=password_hash, roles=roles
                    )
                    user_id = account.id
            except IntegrityError as exc:
                # Lost the check-then-insert race to a concurrent register.
                if any(violates(exc, name) for name in _USERNAME_CONSTRAINTS):
                    log.warning("register.rejected reason=duplicate_user race=true")
                    raise DuplicateUserError() from exc
                raise
            except ValueError as exc:
                raise InputValidationError(str(exc)) from exc

        log.info("register.ok user_id=%s", user_id)

    def authenticate(self, username: str, password: str) -> bool:
        """
        Verify a username/password pair.

        Unknown users and wrong passwords are indistinguishable to the caller.

        :returns: ``True`` when the credentials match a stored account.
        """
        with self.store_guard("authenticate"), self.ro_uow() as uow:
            account = uow.users.get_by_username(username)
            stored_hash = account.password_hash if account is not None else None
        if stored_hash is None:
            log.warning("authenticate.rejected reason=unknown_user")
            return False
        if not self._verify(password, stored_hash):
            log.warning("authenticate.rejected reason=bad_password")
            return False
        return True

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, username: str) -> AuthResult:
        """
        Issue an access token and a fresh refresh token for ``username``.

        The caller is expected to have checked the password already
        (see :meth:`authenticate`).

        :raises UserNotFoundError: If no account has this username.
        """
        with self.store_guard("login.lookup"), self.ro_uow() as uow:
            account = uow.users.get_by_username(username)
            if account is None:
                raise UserNotFoundError()
            user_id, name, roles = account.id, account.username, account.role_set

        result = self._issue(user_id=user_id, username=name, roles=roles)
        log.info("login.ok user_id=%s", user_id)
        return result

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def validate(self, access_token: str, required_roles: Iterable[str] = ()) -> AuthResult:
        """
        Check an access token against the current account and required roles.

        :param access_token: Encoded access token.
        :param required_roles: When non-empty, at least one must be held.
        :returns: Result carrying only ``user_id``.
        :raises UnauthorizedError: On a bad token or a stale/unknown account.
        :raises ForbiddenError: When none of ``required_roles`` is held.
        """
        try:
            claims = self.tokens.decode(access_token)
        except ExpiredTokenError:
            log.warning("validate.rejected reason=expired_token")
            raise UnauthorizedError(INVALID_TOKEN) from None
        except InvalidTokenError:
            log.warning("validate.rejected reason=invalid_token")
            raise UnauthorizedError(INVALID_TOKEN) from None

        with self.store_guard("validate.lookup"), self.ro_uow() as uow:
            account = uow.users.get(claims.subject)
            current_username = account.username if account is not None else None

        if current_username is None:
            log.warning("validate.rejected reason=unknown_subject")
            raise UnauthorizedError(USER_NOT_PRESENT)
        if claims.username != current_username:
            log.warning("validate.rejected reason=username_mismatch user_id=%s", claims.subject)
            raise UnauthorizedError(USER_DETAILS_MISMATCH)

        required = frozenset(required_roles or ())
        if required and not claims.has_any_role(required):
            log.warning("validate.rejected reason=insufficient_roles user_id=%s", claims.subject)
            raise ForbiddenError()

        return AuthResult(user_id=claims.subject)

    # ------------------------------------------------------------------ #
    # Refresh (single-use rotation)
    # ------------------------------------------------------------------ #

    def refresh(self, refresh_token: str) -> AuthResult:
        """
        Consume a refresh token and issue a new token pair.

        The old record is deleted before its replacement is created; of two
        concurrent refreshes with the same token exactly one succeeds.

        :raises UnauthorizedError: If the token is unknown, expired or already used.
        :raises UserNotFoundError: If the owning account no longer exists.
        """
        with self.store_guard("refresh.get"):
            record = self.refresh_store.get(refresh_token)
        if record is None:
            log.warning("refresh.rejected reason=unknown_token")
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        if record.is_expired(self.now_utc()):
            with self.store_guard("refresh.purge"):
                self.refresh_store.delete(record.id)
            log.warning("refresh.rejected reason=expired_token user_id=%s", record.user_id)
            raise UnauthorizedError(REFRESH_TOKEN_EXPIRED)

        with self.store_guard("refresh.consume"):
            consumed = self.refresh_store.delete(record.id)
        if not consumed:
            log.warning("refresh.rejected reason=already_used user_id=%s", record.user_id)
            raise UnauthorizedError(INVALID_REFRESH_TOKEN)

        with self.store_guard("refresh.lookup"), self.ro_uow() as uow:
            account = uow.users.get(record.user_id)
            if account is None:
                raise UserNotFoundError()
            user_id, name, roles = account.id, account.username, account.role_set

        result = self._issue(user_id=user_id, username=name, roles=roles)
        log.info("refresh.ok user_id=%s", user_id)
        return result

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _issue(self, *, user_id: str, username: str, roles: frozenset[str]) -> AuthResult:
        access = self.tokens.issue(user_id, roles, username)
        refresh_id = self._issue_refresh_token(user_id)
        return AuthResult(
            access_token=access,
            refresh_token=refresh_id,
            user_id=user_id,
            roles=tuple(sorted(roles)),
        )

    def _issue_refresh_token(self, user_id: str) -> str:
        record = RefreshTokenRecord(
            id=self.refresh_store.new_id(),
            user_id=user_id,
            expiry_date=self.now_utc() + self.cfg.refresh_expires,
        )
        with self.store_guard("refresh.insert"):
            self.refresh_store.insert(record)
        return record.id

    def _hash(self, password: str) -> str:
        try:
            return self.hasher.hash(password)
        except ValueError as exc:
            raise InputValidationError(str(exc)) from exc
        except Exception as exc:
            log.error("password_hasher.failure error=%s", type(exc).__name__)
            raise InternalServiceError("Password hashing failed") from exc

    def _verify(self, password: str, stored_hash: str) -> bool:
        try:
            return self.hasher.verify(password, stored_hash)
        except Exception as exc:
            log.error("password_hasher.failure op=verify error=%s", type(exc).__name__)
            raise InternalServiceError("Password verification failed") from exc
