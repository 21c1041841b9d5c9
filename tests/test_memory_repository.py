from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from users_api.app.core.errors import UserNotFoundError
from users_api.app.repositories import InMemoryUserRepository
from users_api.app.schemas.user import PaginationOptions, UserCreate, UserFilters, UserUpdate

pytestmark = pytest.mark.anyio

_FIXED = datetime(2024, 1, 15, tzinfo=timezone.utc)


def _john() -> UserCreate:
    return UserCreate(email="john.doe@example.com", first_name="John", last_name="Doe")


async def _seed(repository: InMemoryUserRepository) -> None:
    await repository.create(_john())
    await repository.create(
        UserCreate(email="jane.smith@example.com", first_name="Jane", last_name="Smith")
    )
    await repository.create(
        UserCreate(email="bob.johnson@example.com", first_name="Bob", last_name="Johnson")
    )


async def test_create_assigns_id_and_equal_timestamps(repository: InMemoryUserRepository) -> None:
    user = await repository.create(_john())

    assert user.id == "1"
    assert user.email == "john.doe@example.com"
    assert user.first_name == "John"
    assert user.last_name == "Doe"
    assert user.created_at == user.updated_at
    assert user.created_at.tzinfo is not None


async def test_create_normalizes_email_and_names(repository: InMemoryUserRepository) -> None:
    user = await repository.create(
        UserCreate(email="  JOHN.DOE@EXAMPLE.COM  ", first_name="  John  ", last_name="  Doe  ")
    )

    assert user.email == "john.doe@example.com"
    assert user.first_name == "John"
    assert user.last_name == "Doe"


async def test_create_keeps_empty_names(repository: InMemoryUserRepository) -> None:
    user = await repository.create(UserCreate(email="a@b.com", first_name="", last_name="   "))

    assert user.first_name == ""
    assert user.last_name == ""


async def test_ids_are_never_reused_after_delete(repository: InMemoryUserRepository) -> None:
    first = await repository.create(_john())
    await repository.delete(first.id)
    second = await repository.create(_john())

    assert second.id == "2"
    assert await repository.find_by_id(first.id) is None


async def test_instances_do_not_share_state() -> None:
    left = InMemoryUserRepository()
    right = InMemoryUserRepository()

    await left.create(_john())

    assert await right.count() == 0
    assert (await right.create(_john())).id == "1"


async def test_find_by_id(repository: InMemoryUserRepository) -> None:
    created = await repository.create(_john())

    assert await repository.find_by_id(created.id) == created
    assert await repository.find_by_id("non-existent-id") is None


async def test_find_by_email_is_case_insensitive(repository: InMemoryUserRepository) -> None:
    created = await repository.create(_john())

    assert await repository.find_by_email("JOHN.DOE@EXAMPLE.COM") == created
    assert await repository.find_by_email("  john.doe@example.com ") == created
    assert await repository.find_by_email("non-existent@example.com") is None


async def test_exists_by_email(repository: InMemoryUserRepository) -> None:
    await repository.create(_john())

    assert await repository.exists_by_email("john.doe@example.com") is True
    assert await repository.exists_by_email("non-existent@example.com") is False


async def test_update_merges_fields_and_preserves_created_at(repository: InMemoryUserRepository) -> None:
    created = await repository.create(_john())

    updated = await repository.update(created.id, UserUpdate(first_name=" Jane ", last_name="Smith"))

    assert updated.id == created.id
    assert updated.email == created.email
    assert updated.first_name == "Jane"
    assert updated.last_name == "Smith"
    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at
    assert await repository.find_by_id(created.id) == updated


async def test_update_ignores_empty_strings(repository: InMemoryUserRepository) -> None:
    created = await repository.create(_john())

    updated = await repository.update(created.id, UserUpdate(first_name="", email=""))

    assert updated.first_name == "John"
    assert updated.email == "john.doe@example.com"
    assert updated.updated_at >= created.updated_at


async def test_update_normalizes_email(repository: InMemoryUserRepository) -> None:
    created = await repository.create(_john())

    updated = await repository.update(created.id, UserUpdate(email=" New@Example.COM "))

    assert updated.email == "new@example.com"


async def test_updated_at_never_moves_backwards(clock, repository: InMemoryUserRepository) -> None:
    created = await repository.create(_john())
    clock.current = created.created_at.replace(year=2000)

    updated = await repository.update(created.id, UserUpdate(first_name="Jane"))

    assert updated.updated_at == created.updated_at


async def test_update_unknown_id_raises(repository: InMemoryUserRepository) -> None:
    with pytest.raises(UserNotFoundError, match="User with ID 'non-existent-id' not found"):
        await repository.update("non-existent-id", UserUpdate(first_name="Jane"))


async def test_delete(repository: InMemoryUserRepository) -> None:
    created = await repository.create(_john())

    await repository.delete(created.id)

    assert await repository.find_by_id(created.id) is None
    with pytest.raises(UserNotFoundError):
        await repository.delete(created.id)


async def test_find_many_defaults(repository: InMemoryUserRepository) -> None:
    await _seed(repository)

    result = await repository.find_many()

    assert len(result.data) == 3
    assert result.total == 3
    assert result.page == 1
    assert result.limit == 10
    assert result.total_pages == 1


async def test_find_many_sorts_newest_first(repository: InMemoryUserRepository) -> None:
    await _seed(repository)

    result = await repository.find_many()

    assert [user.first_name for user in result.data] == ["Bob", "Jane", "John"]


async def test_find_many_breaks_timestamp_ties_by_id() -> None:
    repository = InMemoryUserRepository(clock=lambda: _FIXED)
    await _seed(repository)

    result = await repository.find_many()

    assert [user.id for user in result.data] == ["3", "2", "1"]


async def test_find_many_filters_by_email(repository: InMemoryUserRepository) -> None:
    await _seed(repository)

    result = await repository.find_many(UserFilters(email="JOHN"))

    assert sorted(user.email for user in result.data) == [
        "bob.johnson@example.com",
        "john.doe@example.com",
    ]
    assert result.total == 2


async def test_find_many_filters_by_first_name(repository: InMemoryUserRepository) -> None:
    await _seed(repository)

    result = await repository.find_many(UserFilters(first_name="jane"))

    assert len(result.data) == 1
    assert result.data[0].first_name == "Jane"


async def test_find_many_combines_filters(repository: InMemoryUserRepository) -> None:
    await _seed(repository)

    result = await repository.find_many(UserFilters(email="john", last_name="doe"))

    assert [user.email for user in result.data] == ["john.doe@example.com"]


async def test_find_many_paginates(repository: InMemoryUserRepository) -> None:
    await _seed(repository)

    first = await repository.find_many(pagination=PaginationOptions(page=1, limit=2))
    second = await repository.find_many(pagination=PaginationOptions(page=2, limit=2))

    assert len(first.data) == 2
    assert len(second.data) == 1
    assert first.total == second.total == 3
    assert first.total_pages == second.total_pages == 2
    assert (second.page, second.limit) == (2, 2)


async def test_find_many_pages_partition_all_users(repository: InMemoryUserRepository) -> None:
    for index in range(7):
        await repository.create(
            UserCreate(email=f"user{index}@example.com", first_name=f"User{index}", last_name="Test")
        )

    seen = []
    result = await repository.find_many(pagination=PaginationOptions(page=1, limit=2))
    for page in range(1, result.total_pages + 1):
        chunk = await repository.find_many(pagination=PaginationOptions(page=page, limit=2))
        seen.extend(user.id for user in chunk.data)

    assert result.total_pages == math.ceil(7 / 2)
    assert len(seen) == len(set(seen)) == 7


async def test_find_many_total_pages_uses_filtered_total(repository: InMemoryUserRepository) -> None:
    await _seed(repository)

    result = await repository.find_many(UserFilters(first_name="nobody"), PaginationOptions(page=1, limit=2))

    assert result.data == []
    assert result.total == 0
    assert result.total_pages == 0


async def test_find_many_past_last_page_is_empty(repository: InMemoryUserRepository) -> None:
    await _seed(repository)

    result = await repository.find_many(pagination=PaginationOptions(page=5, limit=2))

    assert result.data == []
    assert result.total == 3


async def test_lock_is_per_instance() -> None:
    left = InMemoryUserRepository()
    right = InMemoryUserRepository()

    async with left.lock():
        assert left.lock().locked()
        assert not right.lock().locked()
    assert not left.lock().locked()


async def test_created_user_is_immutable(repository: InMemoryUserRepository) -> None:
    user = await repository.create(_john())

    with pytest.raises(ValidationError):
        user.email = "other@example.com"

    assert (await repository.find_by_id(user.id)).email == "john.doe@example.com"

