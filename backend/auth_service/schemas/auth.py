"""Request and response schemas for the credential endpoints."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_dump, validate


class RegisterSchema(Schema):
    """Input payload for account registration."""

    username = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    roles = fields.List(
        fields.String(validate=validate.Length(min=1, max=64)), load_default=None
    )


class TokenRequestSchema(Schema):
    """Username/password pair exchanged for a token pair."""

    username = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class ValidateRequestSchema(Schema):
    """Access token plus the roles the caller requires (any of)."""

    access_token = fields.String(required=True, data_key="accessToken", validate=validate.Length(min=1))
    roles = fields.List(fields.String(), load_default=list)


class RefreshRequestSchema(Schema):
    """Refresh token to rotate."""

    refresh_token = fields.String(required=True, data_key="refreshToken", validate=validate.Length(min=1))


class AuthResultSchema(Schema):
    """
    Wire form of an ``AuthResult``.

    Keys are camelCase. ``None`` fields are omitted and so is an empty
    ``roles`` list.
    """

    access_token = fields.String(data_key="accessToken")
    refresh_token = fields.String(data_key="refreshToken")
    user_id = fields.String(data_key="userId")
    roles = fields.Method("dump_roles")

    def dump_roles(self, obj: Any) -> list[str] | None:
        roles = getattr(obj, "roles", None)
        return sorted(roles) if roles else None

    @post_dump
    def drop_empty(self, data: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        return {k: v for k, v in data.items() if v is not None}


class MessageSchema(Schema):
    """Plain acknowledgement body."""

    message = fields.String(required=True)
