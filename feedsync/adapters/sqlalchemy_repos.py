# feedsync/adapters/sqlalchemy_repos.py
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.types import NormalizedListing
from ..models import Listing, User
from .repos.listings import ListingRepository
from .repos.users import UserRepository


class SqlAlchemyRepos:
    """ListingStore backed by one AsyncSession. The importer commits per record."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.users = UserRepository(session)
        self.listings = ListingRepository(session)

    async def get_owner(self, owner_id: str) -> User | None:
        return await self.users.get(owner_id)

    async def exists_by_external_id(self, external_id: str) -> bool:
        return await self.listings.exists_by_external_id(external_id)

    async def create_listing(self, listing: NormalizedListing) -> Listing:
        return await self.listings.create(listing)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
