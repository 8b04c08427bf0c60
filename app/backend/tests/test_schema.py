from __future__ import annotations

import asyncio

from sqlalchemy import UniqueConstraint, text

from app.db.base import Base
from app.db.session import AsyncSessionLocal

from .helpers.db import load_session


def test_user_email_is_one_unique_index():
    users = Base.metadata.tables["users"]

    indexes = {ix.name: ix for ix in users.indexes}
    assert indexes["ix_users_email"].unique
    assert not [c for c in users.constraints if isinstance(c, UniqueConstraint)]


def test_session_data_defaults_in_the_database():
    async def insert_raw() -> None:
        async with AsyncSessionLocal() as db:
            await db.execute(text("INSERT INTO sessions (session_id) VALUES ('raw')"))
            await db.commit()

    asyncio.run(insert_raw())
    assert load_session("raw").data == {}
