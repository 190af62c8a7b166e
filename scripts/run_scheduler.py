from __future__ import annotations

import asyncio
import logging

from feedsync.config import settings
from feedsync.entrypoints.cli import configure_logging
from feedsync.jobs.scheduler import build_scheduler


async def main() -> None:
    configure_logging()

    scheduler = build_scheduler()
    scheduler.start()
    logging.getLogger(__name__).info(
        "Scheduler started (every %sh, enabled=%s)",
        settings.SCHED_IMPORT_INTERVAL_HOURS,
        settings.RUN_FEED_CRON,
    )

    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        scheduler.shutdown(wait=False)
        logging.getLogger(__name__).info("Scheduler stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
