"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AuthResultSchema,
    MessageSchema,
    RefreshRequestSchema,
    RegisterSchema,
    TokenRequestSchema,
    ValidateRequestSchema,
)

__all__ = [
    "AuthResultSchema",
    "MessageSchema",
    "RefreshRequestSchema",
    "RegisterSchema",
    "TokenRequestSchema",
    "ValidateRequestSchema",
]
