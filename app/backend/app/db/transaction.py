"""
Unit-of-work wrapper around AsyncSession.

Every block opened by `TransactionCoordinator.begin()` gets its own session
and therefore its own transaction. The default outcome is rollback:
`await uow.commit()` must be the last step of a successful block, anything
else (early return, exception, forgotten commit) is rolled back on exit.

`read()` is for lookups only: it never commits and just closes the session,
so rows loaded through it can still be used after the block.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class UnitOfWork:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.committed = False

    async def commit(self) -> None:
        await self.session.commit()
        self.committed = True


class TransactionCoordinator:
    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def read(self) -> AsyncIterator[AsyncSession]:
        # closing releases the connection; loaded rows stay usable detached
        async with self._session_factory() as session:
            yield session

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[UnitOfWork]:
        async with self._session_factory() as session:
            uow = UnitOfWork(session)
            try:
                yield uow
            finally:
                if not uow.committed:
                    logger.debug("rolling back uncommitted unit of work")
                    await session.rollback()
