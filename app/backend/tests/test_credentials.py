from __future__ import annotations

import asyncio

import pytest
from sqlalchemy import select

from app.core.error_codes import ErrorCode
from app.core.exceptions import Conflict, NotFound
from app.core.security import derive_password
from app.models.user import User
from app.services.credentials import CredentialStore

from .helpers.db import count_users

EMAIL = "user@example.com"


@pytest.fixture
def store(coordinator, clock) -> CredentialStore:
    return CredentialStore(coordinator, clock=clock)


async def _create(coordinator, store, email=EMAIL, name="Ann", password="pw1") -> User:
    async with coordinator.begin() as uow:
        user = await store.create(uow, email, name, password)
        await uow.commit()
    return user


def test_password_round_trip(coordinator, store):
    async def scenario():
        created = await _create(coordinator, store)
        assert (await store.authenticate(EMAIL, "pw1")).id == created.id
        with pytest.raises(NotFound):
            await store.authenticate(EMAIL, "pw2")

        async with coordinator.begin() as uow:
            await store.update_password(uow, EMAIL, "pw2")
            await uow.commit()

        assert (await store.authenticate(EMAIL, "pw2")).id == created.id
        with pytest.raises(NotFound):
            await store.authenticate(EMAIL, "pw1")

    asyncio.run(scenario())


def test_unknown_email_and_wrong_password_fail_the_same_way(coordinator, store):
    async def scenario():
        await _create(coordinator, store)
        errors = []
        for email, password in ((EMAIL, "nope"), ("ghost@example.com", "pw1")):
            with pytest.raises(NotFound) as exc_info:
                await store.authenticate(email, password)
            errors.append((exc_info.value.error_code, str(exc_info.value)))
        return errors

    first, second = asyncio.run(scenario())
    assert first == second == (ErrorCode.INVALID_CREDENTIALS, "Wrong login or password")


def test_password_is_stored_only_in_derived_form(coordinator, store):
    async def scenario():
        await _create(coordinator, store)
        async with coordinator.read() as db:
            return (await db.execute(select(User.password).where(User.email == EMAIL))).scalar_one()

    stored = asyncio.run(scenario())
    assert stored != "pw1"
    assert stored == derive_password("pw1")


def test_legacy_hex_scheme():
    assert derive_password("pw1", scheme="hex") == "707731"


def test_exists_is_exact_match(coordinator, store):
    async def scenario():
        await _create(coordinator, store)
        return await store.exists(EMAIL), await store.exists("User@example.com"), await store.exists("other@example.com")

    assert asyncio.run(scenario()) == (True, False, False)


def test_duplicate_email_at_storage_level_is_conflict(coordinator, store):
    async def scenario():
        await _create(coordinator, store)
        with pytest.raises(Conflict) as exc_info:
            await _create(coordinator, store, name="Bob")
        return exc_info.value

    exc = asyncio.run(scenario())
    assert exc.status_code == 409
    assert exc.error_code == ErrorCode.USER_ALREADY_EXISTS
    assert count_users(EMAIL) == 1


def test_uncommitted_create_is_not_visible(coordinator, store):
    async def scenario():
        async with coordinator.begin() as uow:
            await store.create(uow, EMAIL, "Ann", "pw1")
        return await store.exists(EMAIL)

    assert asyncio.run(scenario()) is False
