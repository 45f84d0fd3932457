"""Password hashing adapter built on Werkzeug's security helpers."""

from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from auth_service.services._shared.ports import PasswordHasher


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    Salted one-way hashing via :func:`werkzeug.security.generate_password_hash`.

    :param method: Werkzeug method spec (``"scrypt"``, ``"pbkdf2:sha256:600000"``, ...).
    :param salt_length: Salt length in characters.
    """

    method: str = "scrypt"
    salt_length: int = 16

    def hash(self, password: str) -> str:
        """
        Hash ``password``.

        :raises ValueError: If the password is empty.
        """
        if not isinstance(password, str) or not password:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(password, method=self.method, salt_length=self.salt_length)

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        # ``check_password_hash`` is not typed and returns ``Any``; coerce to bool for mypy.
        return bool(check_password_hash(hashed, password))
