# feedsync/service_layer/use_cases/import_listings.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any, Awaitable, Callable, Mapping, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from ...adapters.clients.odata_feed import FeedPage, ODataFeedClient
from ...adapters.repos.base import ListingStore
from ...adapters.sqlalchemy_repos import SqlAlchemyRepos
from ...config import settings
from ...domain.normalize import normalize_listing
from ...domain.parsing import get_first
from ...errors import FeedConfigError, OwnerAccountNotFound
from ..dedup import DedupGate
from ..jobruns import finish_job_fail, finish_job_success, start_job

log = logging.getLogger(__name__)


class FeedSource(Protocol):
    async def fetch_page(self, cursor: str | None = None, page_size: int = 100) -> FeedPage:
        ...


@dataclass
class ImportSummary:
    imported: int = 0
    skipped: int = 0
    errored: int = 0
    pages: int = 0
    total_available: int | None = None
    # exhausted | budget | failed | cancelled
    stop_reason: str = "running"

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _record_identity(raw: Any) -> str:
    if isinstance(raw, Mapping):
        v = get_first(raw, "ListingId", "ListingKey")
        if v is not None:
            return str(v)
    return "<unknown>"


class ListingImporter:
    """
    Feed -> normalize -> dedup -> persist, one page at a time.

    Pages and the records inside them are handled strictly in order. A bad
    record is logged, counted and rolled back; it never stops the run. Feed
    errors and a missing owner account are fatal and propagate.
    """

    def __init__(
        self,
        feed: FeedSource,
        store: ListingStore,
        owner_id: str | None,
        *,
        page_size: int = 100,
        page_delay_s: float = 1.0,
        default_state: str = "",
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        if not owner_id:
            raise FeedConfigError("an owner account id is required (FEED_IMPORT_OWNER_ID)")
        self.feed = feed
        self.store = store
        self.owner_id = owner_id
        self.page_size = int(page_size)
        self.page_delay_s = float(page_delay_s)
        self.default_state = default_state
        self.dedup = DedupGate(store)
        self._sleep = sleep
        self.log = logger or log

    @classmethod
    def from_settings(
        cls,
        session: AsyncSession,
        *,
        feed: FeedSource | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> "ListingImporter":
        return cls(
            feed or ODataFeedClient.from_settings(),
            SqlAlchemyRepos(session),
            settings.FEED_IMPORT_OWNER_ID,
            page_size=settings.FEED_PAGE_SIZE,
            page_delay_s=settings.FEED_PAGE_DELAY_S,
            default_state=settings.FEED_DEFAULT_STATE,
            logger=logger,
        )

    async def _ensure_owner(self) -> Any:
        owner = await self.store.get_owner(self.owner_id)
        if owner is None:
            raise OwnerAccountNotFound(self.owner_id)
        return owner

    async def _process_record(self, raw: Any) -> bool:
        """True if imported, False if it already existed."""
        listing = normalize_listing(raw, self.owner_id, default_state=self.default_state)

        if await self.dedup.exists(listing.external_id):
            self.log.info("skipping existing listing external_id=%s", listing.external_id)
            return False

        await self.store.create_listing(listing)
        await self.store.commit()

        a = listing.address
        self.log.info(
            "imported external_id=%s address=%s %s, %s",
            listing.external_id,
            a.street_number,
            a.street_name,
            a.city,
        )
        return True

    async def _handle_record(self, raw: Any, summary: ImportSummary) -> None:
        try:
            imported = await self._process_record(raw)
        except Exception as e:
            summary.errored += 1
            await self.store.rollback()
            self.log.error("error importing listing external_id=%s: %s: %s", _record_identity(raw), type(e).__name__, e)
            return

        if imported:
            summary.imported += 1
        else:
            summary.skipped += 1

    async def run(self, max_listings: int | None = None) -> ImportSummary:
        """
        max_listings caps *imported* records (None/0 = whole feed). It is checked
        before every record and after every page; hitting it is a clean stop.
        """
        budget = max_listings or None
        summary = ImportSummary()

        def budget_reached() -> bool:
            return budget is not None and summary.imported >= budget

        try:
            owner = await self._ensure_owner()
            self.log.info(
                "feed import starting owner=%s page_size=%s budget=%s",
                getattr(owner, "email", None) or self.owner_id,
                self.page_size,
                budget,
            )

            cursor: str | None = None
            while True:
                batch = summary.pages + 1
                self.log.info("fetching batch=%s%s", batch, " (next link)" if cursor else "")
                page = await self.feed.fetch_page(cursor, self.page_size)
                summary.pages = batch

                if page.total_available is not None:
                    summary.total_available = page.total_available

                if not page.records:
                    summary.stop_reason = "exhausted"
                    self.log.info("no more listings to import")
                    break

                self.log.info(
                    "processing batch=%s records=%s total_available=%s",
                    batch,
                    len(page.records),
                    page.total_available,
                )

                for raw in page.records:
                    if budget_reached():
                        break
                    await self._handle_record(raw, summary)

                self.log.info(
                    "batch=%s done imported=%s skipped=%s errored=%s",
                    batch,
                    summary.imported,
                    summary.skipped,
                    summary.errored,
                )

                if budget_reached():
                    summary.stop_reason = "budget"
                    self.log.info("reached max listings limit=%s", budget)
                    break

                if not page.next_cursor:
                    summary.stop_reason = "exhausted"
                    self.log.info("reached end of listings")
                    break

                cursor = page.next_cursor
                self.log.info("waiting %.1fs before next batch", self.page_delay_s)
                await self._sleep(self.page_delay_s)

        except Exception as e:
            summary.stop_reason = "failed"
            self.log.error("feed import fatal: %s: %s", type(e).__name__, e)
            raise
        except asyncio.CancelledError:
            # timeout or shutdown; records already committed stay
            summary.stop_reason = "cancelled"
            self.log.warning("feed import cancelled")
            raise
        finally:
            self.log.info(
                "feed import summary imported=%s skipped=%s errored=%s pages=%s stop_reason=%s",
                summary.imported,
                summary.skipped,
                summary.errored,
                summary.pages,
                summary.stop_reason,
            )

        return summary


async def import_listings(
    session: AsyncSession,
    *,
    max_listings: int | None = None,
    feed: FeedSource | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> ImportSummary:
    """One import run wired from settings. Used by the CLI, the API and the scheduler."""
    importer = ListingImporter.from_settings(session, feed=feed, logger=logger)
    return await importer.run(max_listings=max_listings)


class RunLogAdapter(logging.LoggerAdapter):
    """Prefix every importer line with the job run it belongs to."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        return f"[feed import run={self.extra['run_id']}] {msg}", kwargs


async def run_recorded_import(
    session_factory: Callable[[], Any],
    *,
    job_name: str,
    max_listings: int | None = None,
    timeout_s: float | None = None,
    feed: FeedSource | None = None,
    parent_log: logging.Logger | None = None,
) -> ImportSummary:
    """
    import_listings() bracketed by a JobRun row.

    The JobRun lives in its own session: the import session commits and
    rolls back per record. Failures are recorded, then re-raised.
    """
    async with session_factory() as job_session:
        jr = await start_job(job_session, job_name, {"max_listings": max_listings, "timeout_s": timeout_s})
        await job_session.commit()
        run_id = jr.id

        run_log = RunLogAdapter(parent_log or log, {"run_id": run_id})
        try:
            async with session_factory() as session:
                run = import_listings(session, max_listings=max_listings, feed=feed, logger=run_log)
                if timeout_s:
                    summary = await asyncio.wait_for(run, timeout=timeout_s)
                else:
                    summary = await run
        except Exception as e:
            await finish_job_fail(job_session, jr, e)
            await job_session.commit()
            raise

        await finish_job_success(job_session, jr, summary.as_dict())
        await job_session.commit()
        return summary
