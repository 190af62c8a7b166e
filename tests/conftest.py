# tests/conftest.py
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from feedsync.adapters.clients.odata_feed import FeedPage
from feedsync.errors import FeedFetchError
from feedsync.models import Base
from feedsync.models import User


def make_record(n: int | str, **extra: Any) -> dict[str, Any]:
    """Minimal raw OData Property record."""
    rec = {
        "ListingId": str(n),
        "ListingKey": f"key-{n}",
        "ListPrice": 250000,
        "PropertyType": "Residential",
        "StreetNumber": "100",
        "StreetName": "Main",
        "City": "Houston",
        "StateOrProvince": "TX",
        "PostalCode": "77002",
    }
    rec.update(extra)
    return rec


class FakeFeed:
    """
    Serves a fixed list of pages. The cursor handed back is just the index of
    the next page; `calls` records every (cursor, page_size) requested.
    """

    def __init__(self, pages: list[list[Any]], *, total: int | None = None, fail_at: int | None = None):
        self.pages = pages
        self.total = total
        self.fail_at = fail_at
        self.calls: list[tuple[str | None, int]] = []

    async def fetch_page(self, cursor: str | None = None, page_size: int = 100) -> FeedPage:
        self.calls.append((cursor, page_size))
        idx = int(cursor) if cursor else 0
        if self.fail_at is not None and idx == self.fail_at:
            raise FeedFetchError("failed to fetch listings: HTTP 500 - boom")
        records = self.pages[idx] if idx < len(self.pages) else []
        nxt = str(idx + 1) if idx + 1 < len(self.pages) else None
        return FeedPage(records=records, next_cursor=nxt, total_available=self.total)


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
async def engine():
    """
    Fresh in-memory DB per test. StaticPool makes all connections share the same
    in-memory database for the lifetime of this engine fixture.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def async_session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=True)


@pytest.fixture
async def seeded_owner(async_session_maker):
    async with async_session_maker() as session:  # type: AsyncSession
        u = User(full_name="Feed Importer", email="importer@example.com")
        session.add(u)
        await session.commit()
        await session.refresh(u)
        return u


@pytest.fixture
def feed_settings(monkeypatch, seeded_owner):
    """Point the global settings at the seeded owner; no real feed, no waiting."""
    from feedsync.config import settings

    monkeypatch.setattr(settings, "FEED_IMPORT_OWNER_ID", seeded_owner.id)
    monkeypatch.setattr(settings, "FEED_PAGE_DELAY_S", 0.0)
    monkeypatch.setattr(settings, "FEED_PAGE_SIZE", 2)
    return settings
