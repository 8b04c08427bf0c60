import asyncio
from app.db.session import engine
from app.db.base import Base

async def create_all() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def drop_all() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

def main():
    asyncio.run(create_all())

if __name__ == "__main__":
    main()
