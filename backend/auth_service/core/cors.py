"""CORS policy for the credential endpoints."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from auth_service.core.logger import REQUEST_ID_HEADER


def parse_origins(raw: str | None) -> list[str]:
    """Split a comma-separated ``CORS_ORIGINS`` value, dropping blanks."""
    return [o.strip() for o in (raw or "").split(",") if o.strip()]


def init_app(app: Flask) -> None:
    """Apply Flask-Cors to ``/api/*`` from ``CORS_ORIGINS``.

    A blank value or ``"*"`` allows any origin; credentials are then not
    supported. The request id header is exposed to browsers.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    wildcard = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        expose_headers=[REQUEST_ID_HEADER],
        methods=["GET", "POST", "PUT", "OPTIONS"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
