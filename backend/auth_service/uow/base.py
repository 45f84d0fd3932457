"""
Abstract Unit of Work contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from auth_service.repositories.user import UserRepository


class UnitOfWork(ABC):
    """
    Transactional boundary for one credential operation.

    Concrete units expose the repositories bound to their session
    (currently ``users``) and decide on exit whether to commit.
    """

    users: UserRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
