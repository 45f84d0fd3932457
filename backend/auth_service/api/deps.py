"""Shared API helpers: response building, timing and service wiring."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from auth_service.core.extensions import get_credential_components
from auth_service.core.logger import ensure_request_id
from auth_service.services._shared.base import ServiceContext
from auth_service.services.credentials.dto import CredentialConfig
from auth_service.services.credentials.service import CredentialService

F = TypeVar("F", bound=Callable[..., Any])


def get_credential_service() -> CredentialService:
    """Build a :class:`CredentialService` over the app-wide collaborators.

    The collaborators are shared; only the request context is per call.
    """
    components = get_credential_components()
    return CredentialService(
        token_codec=components.token_codec,
        password_hasher=components.password_hasher,
        refresh_store=components.refresh_store,
        cfg=CredentialConfig(refresh_expires=components.refresh_ttl),
        ctx=ServiceContext(request_id=ensure_request_id()),
    )


def json_body() -> dict[str, Any]:
    """Return the JSON request body, or an empty dict when absent/invalid."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""
    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator logging handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
