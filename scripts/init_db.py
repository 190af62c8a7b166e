# scripts/init_db.py
import asyncio

from feedsync.db import engine
from feedsync.models import Base


async def main() -> None:
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()

    tables = ", ".join(sorted(Base.metadata.tables))
    print(f"OK: {engine.url} has tables {tables} (idempotent).")


if __name__ == "__main__":
    asyncio.run(main())
