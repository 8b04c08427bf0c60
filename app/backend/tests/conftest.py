from __future__ import annotations

import asyncio
import os
import tempfile

# Settings are read at import time, so the environment has to be in place
# before anything under `app` is imported.
_tmp_dir = tempfile.mkdtemp(prefix="money-transfers-tests-")
os.environ.update(
    {
        "PG_HOST": "localhost",
        "PG_PORT": "5432",
        "PG_DB": "unused",
        "PG_USER": "unused",
        "PG_PASSWORD": "unused",
        "DATABASE_URL": f"sqlite+aiosqlite:///{os.path.join(_tmp_dir, 'test.db')}",
        "DISABLE_ASYNC_DB_POOL": "1",
        "PASSWORD_SECRET": "test-secret",
        "EMAIL_ENABLED": "0",
        "ERROR_REPORT_ENABLED": "0",
        "SESSION_COOKIE_SECURE": "0",
    }
)

import pytest

from app.db.init_db import create_all, drop_all
from app.db.session import AsyncSessionLocal
from app.db.transaction import TransactionCoordinator

from .helpers.fakes import FakeClock, FakeMailer


@pytest.fixture(autouse=True)
def fresh_db():
    async def _reset() -> None:
        await drop_all()
        await create_all()

    asyncio.run(_reset())


@pytest.fixture
def coordinator() -> TransactionCoordinator:
    return TransactionCoordinator(AsyncSessionLocal)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()
