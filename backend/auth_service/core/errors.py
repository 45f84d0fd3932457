"""Centralized JSON (RFC 7807) error handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from auth_service.core.logger import ensure_request_id

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

_STATUS_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    415: "unsupported_media_type",
    422: "validation_error",
    500: "internal_server_error",
    503: "service_unavailable",
}


def status_to_code(status_code: int) -> str:
    """Map an HTTP status to the stable ``code`` field of a problem."""
    return _STATUS_CODES.get(status_code, "error")


def as_problem(
    *,
    status: int,
    message: str,
    code: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build an RFC 7807 Problem Details dict.

    :param status: HTTP status code.
    :param message: Human-readable reason (safe for clients).
    :param code: Stable machine-consumable error code; derived from
        ``status`` when omitted.
    :param details: Optional structured details.
    :returns: Problem+JSON dictionary carrying the request id.
    :rtype: dict
    """
    problem: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path,
        "code": code or status_to_code(status),
        "request_id": ensure_request_id(),
    }
    if details:
        problem["details"] = details
    return problem


def problem_response(problem: dict[str, Any]) -> tuple[Response, int]:
    """Wrap a problem dict in an ``application/problem+json`` response."""
    resp = jsonify(problem)
    resp.mimetype = PROBLEM_MIMETYPE
    return resp, int(problem["status"])


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Reason presented to clients as the problem ``detail``.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier. Derived from ``status_code`` when omitted.
    details : dict[str, Any] | None, optional
        Structured payload included in the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code or status_to_code(self.status_code)
        self.details = details or {}

    def to_problem(self) -> dict[str, Any]:
        """Serialize into an RFC 7807 problem dict."""
        return as_problem(
            status=self.status_code,
            code=self.code,
            message=self.message,
            details=self.details or None,
        )


class NotFound(APIError):
    """404 when a referenced account is missing."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND)


class Conflict(APIError):
    """409 for uniqueness collisions."""

    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT)


class Unauthorized(APIError):
    """401 for bad credentials or tokens."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED)


class Forbidden(APIError):
    """403 when the caller lacks every required role."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN)


def init_app(app: Flask) -> None:
    """
    Attach problem+json error handlers to the Flask app.

    Notes
    -----
    - 4xx are logged as warnings without traceback, 5xx as errors with one.
    - Store failures that escape the service layer answer 503.
    - Unexpected exceptions answer 500 and never leak internals.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        level = log.error if err.status_code >= 500 else log.warning
        level("api_error code=%s status=%s detail=%s", err.code, err.status_code, err.message)
        return problem_response(err.to_problem())

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        message = (err.description or HTTPStatus(status).phrase).strip()
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        log.warning("http_error status=%s detail=%s", status, message)
        return problem_response(as_problem(status=status, message=message))

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        log.warning("validation_error fields=%s", sorted(err.normalized_messages()))
        return problem_response(
            as_problem(
                status=HTTPStatus.UNPROCESSABLE_ENTITY,
                message="Validation failed",
                details={"errors": err.messages},
            )
        )

    @app.errorhandler(SQLAlchemyError)
    @app.errorhandler(RedisError)
    def handle_store_error(err: Exception):
        log.error("store_error type=%s", type(err).__name__, exc_info=True)
        return problem_response(
            as_problem(
                status=HTTPStatus.SERVICE_UNAVAILABLE,
                message="Credential store unavailable",
            )
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("unhandled_exception type=%s", type(err).__name__, exc_info=True)
        return problem_response(
            as_problem(status=HTTPStatus.INTERNAL_SERVER_ERROR, message="Unexpected error")
        )
