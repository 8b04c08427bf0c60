from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from app.models.session import ClientSession

from .helpers.db import count_sessions


def _row(session_id: str) -> ClientSession:
    return ClientSession(id=session_id, data={}, ctime=datetime.now(timezone.utc))


def test_commit_is_explicit(coordinator):
    async def scenario():
        async with coordinator.begin() as uow:
            uow.session.add(_row("kept"))
            await uow.commit()
        async with coordinator.begin() as uow:
            uow.session.add(_row("dropped"))
            await uow.session.flush()

    asyncio.run(scenario())
    assert count_sessions() == 1


def test_exception_rolls_back(coordinator):
    async def scenario():
        async with coordinator.begin() as uow:
            uow.session.add(_row("a"))
            await uow.session.flush()
            raise ValueError("boom")

    with pytest.raises(ValueError):
        asyncio.run(scenario())
    assert count_sessions() == 0


def test_units_are_isolated(coordinator):
    async def scenario():
        async with coordinator.begin() as outer:
            outer.session.add(_row("outer"))
            async with coordinator.begin() as inner:
                inner.session.add(_row("inner"))
            await outer.commit()

    asyncio.run(scenario())
    assert count_sessions() == 1
