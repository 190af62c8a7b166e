# feedsync/service_layer/dedup.py
from __future__ import annotations

from ..adapters.repos.base import ListingStore


class DedupGate:
    """
    Skip records whose external id is already stored.

    Best effort only: two overlapping runs can both see "missing". The unique
    constraint on listings.external_id decides; the loser gets a per-record error.
    """

    def __init__(self, store: ListingStore) -> None:
        self._store = store

    async def exists(self, external_id: str) -> bool:
        return await self._store.exists_by_external_id(external_id)
