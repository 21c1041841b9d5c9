"""
In‑memory implementation of ``UserRepository``.

Users are kept in a dictionary keyed by identifier, giving O(1) point
lookups.  Identifiers come from a per‑instance counter that starts at
1 and is never reset, so an identifier is never reused even after the
user holding it is deleted.

Filtering and sorting scan the whole collection on every
``find_many`` call; there are no secondary indexes.  That is fine for
the moderate volumes this backend is meant for.

None of the methods contain an ``await``, so under asyncio each call
runs to completion without interleaving with another one.  Sequences
of calls that must be atomic together are guarded by ``lock()``.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from ..core.errors import UserNotFoundError
from ..schemas.user import (
    PaginatedResult,
    PaginationOptions,
    User,
    UserCreate,
    UserFilters,
    UserUpdate,
)
from .base import UserRepository, normalize_email, normalize_name

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _matches(user: User, filters: UserFilters) -> bool:
    if filters.email and filters.email.lower() not in user.email:
        return False
    if filters.first_name and filters.first_name.lower() not in user.first_name.lower():
        return False
    if filters.last_name and filters.last_name.lower() not in user.last_name.lower():
        return False
    return True


class InMemoryUserRepository(UserRepository):
    """Dictionary‑backed user store.

    Parameters
    ----------
    clock : Callable[[], datetime], optional
        Source of timestamps.  Defaults to the current UTC time; tests
        pass a fake clock to control ordering.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._users: Dict[str, User] = {}
        self._next_id = 1
        self._clock = clock or _utcnow
        self._lock: Optional[asyncio.Lock] = None

    def lock(self) -> asyncio.Lock:
        # Created on first use so it binds to the running loop rather than
        # the one current when the repository was built (Python 3.9).
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def create(self, data: UserCreate) -> User:
        now = self._clock()
        user = User(
            id=str(self._next_id),
            email=normalize_email(data.email),
            first_name=normalize_name(data.first_name or ""),
            last_name=normalize_name(data.last_name or ""),
            created_at=now,
            updated_at=now,
        )
        self._users[user.id] = user
        self._next_id += 1
        logger.debug("Stored user %s", user.id)
        return user

    async def find_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        normalized = normalize_email(email)
        for user in self._users.values():
            if user.email == normalized:
                return user
        return None

    async def update(self, user_id: str, data: UserUpdate) -> User:
        existing = self._users.get(user_id)
        if existing is None:
            raise UserNotFoundError(user_id)

        changes = {}
        # Falsy values are skipped, so "" never blanks a field.
        if data.email:
            changes["email"] = normalize_email(data.email)
        if data.first_name:
            changes["first_name"] = normalize_name(data.first_name)
        if data.last_name:
            changes["last_name"] = normalize_name(data.last_name)
        changes["updated_at"] = max(self._clock(), existing.updated_at)

        updated = existing.model_copy(update=changes)
        self._users[user_id] = updated
        logger.debug("Updated user %s (%s)", user_id, ", ".join(sorted(changes)))
        return updated

    async def delete(self, user_id: str) -> None:
        if user_id not in self._users:
            raise UserNotFoundError(user_id)
        del self._users[user_id]
        logger.debug("Removed user %s", user_id)

    async def find_many(
        self,
        filters: Optional[UserFilters] = None,
        pagination: Optional[PaginationOptions] = None,
    ) -> PaginatedResult[User]:
        users: List[User] = list(self._users.values())
        if filters is not None and not filters.is_empty():
            users = [user for user in users if _matches(user, filters)]

        # Newest first; the numeric id breaks ties between equal timestamps.
        users.sort(key=lambda user: (user.created_at, int(user.id)), reverse=True)

        page = (pagination.page if pagination else None) or DEFAULT_PAGE
        limit = (pagination.limit if pagination else None) or DEFAULT_LIMIT
        offset = (page - 1) * limit
        return PaginatedResult[User].build(users[offset:offset + limit], len(users), page, limit)

    async def count(self) -> int:
        return len(self._users)
