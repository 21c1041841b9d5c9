"""
Business logic for users.

``UserService`` sits between the API handlers and the repository.  It
adds the rules the repository does not enforce on its own:

* e‑mail addresses are unique across users (checked on create and on
  update when the e‑mail changes);
* update and delete target an existing user, and a missing user is
  always reported as ``UserNotFoundError`` raised here, not by the
  repository;
* list requests stay within the pagination bounds.

Each lookup and the mutation that depends on it run under the
repository lock, so two concurrent requests cannot both pass the
uniqueness check for the same e‑mail.
"""

import logging
from typing import Optional, Union

from ..core.errors import InvalidUserDataError, UserEmailAlreadyExistsError, UserNotFoundError
from ..repositories import UserRepository, normalize_email
from ..schemas.user import (
    PaginatedResult,
    PaginationOptions,
    User,
    UserCreate,
    UserFilters,
    UserUpdate,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_PAGE_LIMIT = 100

UserId = Union[str, int]


class UserService:
    """Business operations on users.

    Stateless apart from the repository it wraps; any number of
    services may share one repository.
    """

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    @property
    def repository(self) -> UserRepository:
        return self._repository

    async def create_user(self, data: UserCreate) -> User:
        """Create a user after checking that the e‑mail is free."""
        async with self._repository.lock():
            if await self._repository.find_by_email(data.email) is not None:
                raise UserEmailAlreadyExistsError(data.email)
            user = await self._repository.create(data)
        logger.info("Registered user %s <%s>", user.id, user.email)
        return user

    async def get_user_by_id(self, user_id: UserId) -> User:
        """Return the user or raise ``UserNotFoundError``."""
        user_key = str(user_id)
        user = await self._repository.find_by_id(user_key)
        if user is None:
            raise UserNotFoundError(user_key)
        return user

    async def update_user(self, user_id: UserId, data: UserUpdate) -> User:
        """Apply a partial update.

        The new e‑mail, if any, is normalized before it is compared
        with the stored one, so changing only its case or surrounding
        whitespace is not treated as a change.
        """
        user_key = str(user_id)
        async with self._repository.lock():
            existing = await self._repository.find_by_id(user_key)
            if existing is None:
                raise UserNotFoundError(user_key)

            if data.email and normalize_email(data.email) != existing.email:
                if await self._repository.exists_by_email(data.email):
                    raise UserEmailAlreadyExistsError(data.email)

            user = await self._repository.update(user_key, data)
        logger.info("Updated user %s", user_key)
        return user

    async def delete_user(self, user_id: UserId) -> None:
        """Delete the user or raise ``UserNotFoundError``."""
        user_key = str(user_id)
        async with self._repository.lock():
            if await self._repository.find_by_id(user_key) is None:
                raise UserNotFoundError(user_key)
            await self._repository.delete(user_key)
        logger.info("Deleted user %s", user_key)

    async def get_users(
        self,
        filters: Optional[UserFilters] = None,
        pagination: Optional[PaginationOptions] = None,
    ) -> PaginatedResult[User]:
        """Return one page of users, newest first.

        Raises
        ------
        InvalidUserDataError
            If ``page`` is below 1 or ``limit`` is outside 1‑100.  The
            repository is not consulted in that case.
        """
        if pagination is not None:
            if pagination.page < 1:
                raise InvalidUserDataError(
                    "Page must be greater than 0", {"page": pagination.page}
                )
            if pagination.limit < 1 or pagination.limit > MAX_PAGE_LIMIT:
                raise InvalidUserDataError(
                    f"Limit must be between 1 and {MAX_PAGE_LIMIT}", {"limit": pagination.limit}
                )
        return await self._repository.find_many(filters, pagination)
