# feedsync/adapters/repos/listings.py
from __future__ import annotations

from dataclasses import asdict
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.types import NormalizedListing
from ...models import Listing


def listing_row_values(listing: NormalizedListing) -> dict[str, Any]:
    """
    Flatten a NormalizedListing into Listing column values.
    Column names match the dataclass fields; the address is inlined.
    """
    values = asdict(listing)  # images -> [{"url": ...}]
    address = values.pop("address")
    return {**values, **address}


class ListingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists_by_external_id(self, external_id: str) -> bool:
        q = select(func.count()).select_from(Listing).where(Listing.external_id == external_id)
        return int((await self.session.execute(q)).scalar_one()) > 0

    async def get_by_external_id(self, external_id: str) -> Listing | None:
        q = select(Listing).where(Listing.external_id == external_id)
        return (await self.session.execute(q)).scalars().first()

    async def create(self, listing: NormalizedListing) -> Listing:
        row = Listing(**listing_row_values(listing))
        self.session.add(row)
        # surfaces the unique-constraint violation here, on the offending record
        await self.session.flush()
        return row

    async def count(self) -> int:
        q = select(func.count()).select_from(Listing)
        return int((await self.session.execute(q)).scalar_one())
