"""
User endpoints for API v1.

Provide creation, lookup, partial update, deletion and a paginated,
filterable listing of users.  Handlers only translate between HTTP
and ``UserService``; every business rule (unique e‑mail, existence,
pagination bounds) lives in the service, and the domain errors it
raises are turned into responses by the handler registered in
``main.create_app``.
"""

import re
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from users_api.app.api.deps import get_user_service
from users_api.app.core.errors import InvalidUserDataError
from users_api.app.schemas.user import (
    PaginatedResult,
    PaginationOptions,
    UserCreateRequest,
    UserFilters,
    UserRead,
    UserUpdateRequest,
)
from users_api.app.services.user_service import DEFAULT_LIMIT, DEFAULT_PAGE, UserService

router = APIRouter()

USER_ID_PATTERN = re.compile(r"[0-9]+")


def _parse_user_id(user_id: str) -> int:
    """Return ``user_id`` as a positive integer or raise a 400 error.

    Only plain ASCII digits are accepted, so forms ``int()`` would
    tolerate (``" 7 "``, ``"1_0"``, ``"+3"``) are rejected.
    """
    if not USER_ID_PATTERN.fullmatch(user_id):
        raise InvalidUserDataError(
            f"Parameter 'user_id' must be a positive integer, received: '{user_id}'",
            {"user_id": user_id},
        )
    parsed = int(user_id)
    if parsed < 1:
        raise InvalidUserDataError(
            f"Parameter 'user_id' must be a positive integer, received: {parsed}",
            {"user_id": user_id},
        )
    return parsed


async def _list_users(
    service: UserService,
    page: int,
    limit: int,
    email: Optional[str],
    first_name: Optional[str],
    last_name: Optional[str],
) -> PaginatedResult[UserRead]:
    filters = UserFilters(email=email or None, first_name=first_name or None, last_name=last_name or None)
    result = await service.get_users(
        None if filters.is_empty() else filters,
        PaginationOptions(page=page, limit=limit),
    )
    return PaginatedResult[UserRead](
        data=[UserRead.from_domain(user) for user in result.data],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: UserCreateRequest,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Create a new user.

    Returns HTTP 409 if another user already has the same e‑mail
    (compared case‑insensitively, ignoring surrounding whitespace).
    """
    user = await service.create_user(user_in)
    return UserRead.from_domain(user)


@router.get("/", response_model=PaginatedResult[UserRead])
async def list_users(
    page: int = Query(DEFAULT_PAGE, description="Page number (1-based)"),
    limit: int = Query(DEFAULT_LIMIT, description="Items per page (max 100)"),
    email: Optional[str] = Query(None, description="Filter by email (partial match)"),
    first_name: Optional[str] = Query(None, description="Filter by first name (partial match)"),
    last_name: Optional[str] = Query(None, description="Filter by last name (partial match)"),
    service: UserService = Depends(get_user_service),
) -> PaginatedResult[UserRead]:
    """Return a page of users, newest first.

    Bounds on ``page`` and ``limit`` are checked by the service, which
    answers with HTTP 400 when they are violated.
    """
    return await _list_users(service, page, limit, email, first_name, last_name)


@router.get("/search", response_model=PaginatedResult[UserRead])
async def search_users(
    page: int = Query(DEFAULT_PAGE),
    limit: int = Query(DEFAULT_LIMIT),
    email: Optional[str] = Query(None),
    first_name: Optional[str] = Query(None),
    last_name: Optional[str] = Query(None),
    service: UserService = Depends(get_user_service),
) -> PaginatedResult[UserRead]:
    """Same as the listing endpoint, kept for clients using ``/search``."""
    return await _list_users(service, page, limit, email, first_name, last_name)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Retrieve a single user by ID.  Returns HTTP 404 if not found."""
    user = await service.get_user_by_id(_parse_user_id(user_id))
    return UserRead.from_domain(user)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    user_in: UserUpdateRequest,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Update some fields of a user.

    Omitted or empty fields keep their current value.
    """
    user = await service.update_user(_parse_user_id(user_id), user_in)
    return UserRead.from_domain(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> None:
    """Delete a user by ID.  Returns HTTP 404 if not found."""
    await service.delete_user(_parse_user_id(user_id))
    return None
