# feedsync/errors.py
from __future__ import annotations


class FeedSyncError(Exception):
    """Fatal to an import run. Unwinds to the scheduler / CLI / API caller."""


class FeedConfigError(FeedSyncError, ValueError):
    """Feed URL missing, without an access token, or not an OData resource."""


class OwnerAccountNotFound(FeedSyncError):
    def __init__(self, owner_id: str) -> None:
        super().__init__(f"owner account {owner_id!r} not found")
        self.owner_id = owner_id


class FeedFetchError(FeedSyncError):
    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class FeedProtocolError(FeedSyncError):
    """Response body is not a usable OData collection."""


class RecordError(ValueError):
    """Recoverable: only the offending record is dropped."""


class MissingIdentityError(RecordError):
    pass
