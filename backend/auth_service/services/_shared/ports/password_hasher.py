from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """
    One-way password hashing capability.

    Implementations must never return the plaintext from :meth:`hash`.
    """

    def hash(self, password: str) -> str: ...

    def verify(self, password: str, hashed: str) -> bool: ...
