"""Repository package exposing persistence-layer access for domain models."""

from __future__ import annotations

from auth_service.repositories.base import BaseRepository
from auth_service.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
]
