"""
Repository interface for user persistence.

``UserRepository`` is the contract every storage backend implements.
All methods are coroutines so that a backend doing real I/O can be
dropped in without changing callers; the in‑memory backend simply
never suspends.

Repositories never raise domain errors for business rules.  The only
error they signal is ``UserNotFoundError`` from ``update`` and
``delete``, which the service pre‑empts with its own existence check.
"""

from abc import ABC, abstractmethod
from typing import AsyncContextManager, Optional

from ..schemas.user import (
    PaginatedResult,
    PaginationOptions,
    User,
    UserCreate,
    UserFilters,
    UserUpdate,
)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def normalize_name(value: str) -> str:
    return value.strip()


class UserRepository(ABC):
    """Persistence contract for ``User`` entities."""

    @abstractmethod
    async def create(self, data: UserCreate) -> User:
        """Store a new user, assigning its identifier and timestamps."""

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        """Return the user with ``user_id`` or ``None``."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Return the user whose normalized email equals ``email``."""

    @abstractmethod
    async def update(self, user_id: str, data: UserUpdate) -> User:
        """Merge the non‑empty fields of ``data`` and refresh ``updated_at``.

        Raises ``UserNotFoundError`` if ``user_id`` is unknown.
        """

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        """Remove a user.  Raises ``UserNotFoundError`` if unknown."""

    @abstractmethod
    async def find_many(
        self,
        filters: Optional[UserFilters] = None,
        pagination: Optional[PaginationOptions] = None,
    ) -> PaginatedResult[User]:
        """Filter, sort newest first, then return the requested page."""

    @abstractmethod
    async def count(self) -> int:
        """Return the number of stored users."""

    @abstractmethod
    def lock(self) -> AsyncContextManager[None]:
        """Return the critical section for check‑then‑act sequences.

        The service holds it across a lookup and the mutation that
        depends on it.  Repository methods must not acquire it
        themselves.
        """

    async def exists_by_email(self, email: str) -> bool:
        return await self.find_by_email(email) is not None
