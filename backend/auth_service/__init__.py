"""Credential lifecycle service.

Exposes :func:`auth_service.factory.create_app` at package level so WSGI
servers and the ``flask`` CLI can ``from auth_service import create_app``.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
