# feedsync/entrypoints/cli.py
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from ..config import settings
from ..db import async_session, engine
from ..models import Base
from ..service_layer.use_cases.import_listings import import_listings

log = logging.getLogger("feedsync.import")


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    # Quiet the usual offenders
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Import listings from the external OData feed.")
    p.add_argument(
        "--max-listings",
        type=int,
        default=settings.MAX_LISTINGS,
        help="stop after importing this many new listings (default: MAX_LISTINGS or the whole feed)",
    )
    p.add_argument("--init-db", action="store_true", help="create tables before importing")
    return p.parse_args(argv)


async def _run(max_listings: int | None, init_db: bool) -> None:
    try:
        if init_db:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        async with async_session() as session:
            await import_listings(session, max_listings=max_listings)
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    """
    Exit 0 on a clean pass (budget stops included), 1 on any fatal error.
    """
    configure_logging()
    args = _parse_args(argv)

    try:
        asyncio.run(_run(args.max_listings, args.init_db))
    except Exception as e:
        log.error("Fatal error: %s: %s", type(e).__name__, e)
        return 1

    log.info("Import completed!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
