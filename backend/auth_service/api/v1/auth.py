"""Credential endpoints: register, token, validate and refresh."""

from __future__ import annotations

from typing import Any

from flask import Blueprint

from auth_service.api.deps import get_credential_service, json_body, json_response, timing
from auth_service.core.errors import Unauthorized
from auth_service.schemas import (
    AuthResultSchema,
    MessageSchema,
    RefreshRequestSchema,
    RegisterSchema,
    TokenRequestSchema,
    ValidateRequestSchema,
)
from auth_service.services._shared.result import Failure, capture
from auth_service.services.credentials.service import CredentialService

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
token_schema = TokenRequestSchema()
validate_schema = ValidateRequestSchema()
refresh_schema = RefreshRequestSchema()
result_schema = AuthResultSchema()
message_schema = MessageSchema()

USER_ADDED = "User Successfully Added"
INVALID_CREDENTIALS = "Invalid User Credentials provided"


def _unwrap(service: CredentialService, fn, *args: Any) -> Any:
    """Run a service call and raise the matching API error on failure."""
    outcome = capture(fn, *args)
    if isinstance(outcome, Failure):
        raise service.translate_failure(outcome)
    return outcome.value


@bp.post("/register")
@timing
def register():
    """Create an account. Answers 409 when the username is taken."""
    data = register_schema.load(json_body())
    service = get_credential_service()
    _unwrap(service, service.register, data["username"], data["password"], data["roles"])
    return json_response(message_schema.dump({"message": USER_ADDED}))


@bp.post("/token")
@timing
def token():
    """Exchange a username/password pair for an access + refresh token pair."""
    data = token_schema.load(json_body())
    service = get_credential_service()
    if not _unwrap(service, service.authenticate, data["username"], data["password"]):
        raise Unauthorized(INVALID_CREDENTIALS)
    result = _unwrap(service, service.login, data["username"])
    return json_response(result_schema.dump(result))


@bp.post("/validate")
@timing
def validate():
    """Check an access token, optionally requiring any of ``roles``."""
    data = validate_schema.load(json_body())
    service = get_credential_service()
    result = _unwrap(service, service.validate, data["access_token"], data["roles"])
    return json_response(result_schema.dump(result))


@bp.put("/refresh")
@timing
def refresh():
    """Rotate a refresh token. The presented token cannot be used again."""
    data = refresh_schema.load(json_body())
    service = get_credential_service()
    result = _unwrap(service, service.refresh, data["refresh_token"])
    return json_response(result_schema.dump(result))
