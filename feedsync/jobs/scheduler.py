# feedsync/jobs/scheduler.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from ..config import settings
from ..db import async_session
from ..service_layer.use_cases.import_listings import FeedSource, ImportSummary, run_recorded_import

log = logging.getLogger(__name__)

JOB_NAME = "feed_import_scheduled"


async def run_supervised_import(
    *,
    max_listings: int | None,
    session_factory: Callable[[], Any] = async_session,
    timeout_s: float | None = None,
    feed: FeedSource | None = None,
) -> ImportSummary | None:
    """
    One bounded import run as a supervised task.

    The run logs through this module's logger (prefixed with its JobRun id);
    its terminal status is logged here and recorded on the JobRun. Nothing
    propagates past this point: the trigger does not await the task.
    """
    log.info("[feed import] starting (max_listings=%s)", max_listings)
    try:
        summary = await run_recorded_import(
            session_factory,
            job_name=JOB_NAME,
            max_listings=max_listings,
            timeout_s=timeout_s,
            feed=feed,
            parent_log=log,
        )
    except Exception as e:
        log.error("[feed import] job failed: %s: %s", type(e).__name__, e)
        return None

    log.info(
        "[feed import] job completed successfully imported=%s skipped=%s errored=%s stop_reason=%s",
        summary.imported,
        summary.skipped,
        summary.errored,
        summary.stop_reason,
    )
    return summary


class ImportTrigger:
    """
    Timer callback. Quiet-by-default posture: when disabled it fires and
    does nothing. When enabled it launches one supervised run and returns
    without waiting for it.
    """

    def __init__(
        self,
        *,
        enabled: bool,
        budget: int,
        allow_overlap: bool = False,
        timeout_s: float | None = None,
        runner: Callable[[int], Awaitable[Any]] | None = None,
    ) -> None:
        self.enabled = enabled
        self.budget = budget
        self.allow_overlap = allow_overlap
        self.timeout_s = timeout_s
        self._runner = runner or self._default_runner
        self._tasks: set[asyncio.Task] = set()

    @classmethod
    def from_settings(cls) -> "ImportTrigger":
        return cls(
            enabled=settings.RUN_FEED_CRON,
            budget=settings.SCHED_IMPORT_BUDGET,
            allow_overlap=settings.SCHED_IMPORT_ALLOW_OVERLAP,
            timeout_s=settings.IMPORT_RUN_TIMEOUT_S,
        )

    async def _default_runner(self, budget: int) -> ImportSummary | None:
        return await run_supervised_import(max_listings=budget, timeout_s=self.timeout_s)

    @property
    def in_flight(self) -> bool:
        return any(not t.done() for t in self._tasks)

    async def fire(self) -> asyncio.Task | None:
        if not self.enabled:
            log.info("Skipping periodic feed import because RUN_FEED_CRON is not set to true.")
            return None

        if self.in_flight and not self.allow_overlap:
            log.warning("Skipping periodic feed import: previous run is still in progress.")
            return None

        log.info("Starting periodic feed import (%s records)...", self.budget)
        task = asyncio.create_task(self._runner(self.budget), name="feed-import")
        # strong ref until done, otherwise the loop may drop the task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task


def build_scheduler(trigger: ImportTrigger | None = None) -> AsyncIOScheduler:
    trigger = trigger or ImportTrigger.from_settings()
    sched = AsyncIOScheduler()

    # fire() only launches the run, so a slow import never blocks the timer
    sched.add_job(
        trigger.fire,
        "interval",
        hours=settings.SCHED_IMPORT_INTERVAL_HOURS,
        id="feed_import",
        coalesce=True,
    )

    return sched
