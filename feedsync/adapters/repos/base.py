# feedsync/adapters/repos/base.py
from __future__ import annotations

from typing import Any, Protocol

from ...domain.types import NormalizedListing


class ListingStore(Protocol):
    """Persistence seam the importer writes through."""

    async def get_owner(self, owner_id: str) -> Any | None:
        raise NotImplementedError

    async def exists_by_external_id(self, external_id: str) -> bool:
        raise NotImplementedError

    async def create_listing(self, listing: NormalizedListing) -> Any:
        raise NotImplementedError

    async def commit(self) -> None:
        raise NotImplementedError

    async def rollback(self) -> None:
        raise NotImplementedError
