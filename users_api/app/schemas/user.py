"""
Pydantic models for user data.

``User`` is the stored entity.  It is frozen: the repository produces
a new value on every update instead of mutating the old one, so a
``User`` handed out to a caller never changes underneath it.

``UserCreate`` and ``UserUpdate`` are the inputs of the store and the
service.  They carry no format validation; the HTTP layer uses
``UserCreateRequest`` and ``UserUpdateRequest`` which add it.
``UserRead`` is the response shape returned by the API.
"""

import math
import re
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator

T = TypeVar("T")

# Deliberately loose: one "@", no whitespace, a dot in the domain part.
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
NAME_MAX_LENGTH = 100


class User(BaseModel):
    """A user record owned by the repository."""

    id: str
    email: str
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime

    model_config = {
        "frozen": True,
    }


class UserCreate(BaseModel):
    """Data required to create a user."""

    email: str = Field(..., examples=["john.doe@example.com"])
    first_name: str = Field(..., examples=["John"])
    last_name: str = Field(..., examples=["Doe"])


class UserUpdate(BaseModel):
    """Schema for updating an existing user.

    All fields are optional; only provided, non‑empty values will be
    applied.  An empty string leaves the stored value unchanged.
    """

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UserFilters(BaseModel):
    """Case‑insensitive substring filters, all of which must match."""

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.email or self.first_name or self.last_name)


class PaginationOptions(BaseModel):
    """Requested page (1‑based) and page size.

    Bounds are checked by ``UserService.get_users``, not here, so the
    service stays the single place where they are enforced.
    """

    page: int = 1
    limit: int = 10


class PaginatedResult(BaseModel, Generic[T]):
    """One page of results plus the totals needed to page through them."""

    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, items: List[T], total: int, page: int, limit: int) -> "PaginatedResult[T]":
        return cls(
            data=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )


def _check_email(value: str) -> str:
    if not EMAIL_PATTERN.match(value.strip()):
        raise ValueError("Please provide a valid email address")
    return value


def _check_name(value: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError("Name must not be empty")
    if len(stripped) > NAME_MAX_LENGTH:
        raise ValueError(f"Name must not exceed {NAME_MAX_LENGTH} characters")
    return value


class UserCreateRequest(UserCreate):
    """Request body for ``POST /users``."""

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_name(v)


class UserUpdateRequest(UserUpdate):
    """Request body for ``PATCH /users/{user_id}``.

    Empty strings are let through so that the "empty means unchanged"
    rule of the service applies to HTTP callers as well.
    """

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return v
        return _check_email(v)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return v
        return _check_name(v)


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: str
    email: str
    first_name: str
    last_name: str
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }

    @classmethod
    def from_domain(cls, user: User) -> "UserRead":
        return cls(**user.model_dump())
