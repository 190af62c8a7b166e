# feedsync/adapters/clients/odata_feed.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs, quote, urlsplit

import httpx

from ...config import settings
from ...errors import FeedConfigError, FeedFetchError, FeedProtocolError

log = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"(access_token=)[^&\s\"']+", re.IGNORECASE)
_ODATA_SEGMENT = "/odata/"


def redact_token(text: str) -> str:
    """Never let the feed credential reach logs or error messages."""
    return _TOKEN_RE.sub(r"\1***", text)


@dataclass(frozen=True)
class FeedPage:
    records: list[Any] = field(default_factory=list)
    next_cursor: str | None = None
    total_available: int | None = None


class ODataFeedClient:
    """
    RESO Web API (OData) listing feed, token-in-URL flavour (e.g. Bridge / HAR).

    The first page is built from the configured resource URL plus $filter/$top.
    Later pages follow the server's @odata.nextLink verbatim: it already carries
    the token, the filter and the server-side paging state.
    """

    def __init__(
        self,
        feed_url: str | None,
        *,
        filter_expr: str,
        timeout_s: float = 30,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        url = (feed_url or "").strip()
        parts = urlsplit(url)
        token = (parse_qs(parts.query).get("access_token") or [""])[0].strip()

        if not token:
            raise FeedConfigError(
                "feed URL must include an access_token query parameter (full OData URL from the provider)"
            )
        if _ODATA_SEGMENT not in parts.path.lower():
            raise FeedConfigError(
                f"feed URL must be an OData endpoint (…/OData/<dataset>/Property?access_token=…), got {redact_token(url)!r}"
            )

        self.base_url = f"{parts.scheme}://{parts.netloc}{parts.path}"
        self.filter_expr = filter_expr
        self._access_token = token
        self._timeout = httpx.Timeout(float(timeout_s))
        self._http = http_client

    @classmethod
    def from_settings(cls, http_client: httpx.AsyncClient | None = None) -> "ODataFeedClient":
        return cls(
            settings.FEED_API_URL,
            filter_expr=settings.FEED_FILTER,
            timeout_s=settings.FEED_HTTP_TIMEOUT_S,
            http_client=http_client,
        )

    def initial_url(self, page_size: int) -> str:
        return (
            f"{self.base_url}?access_token={quote(self._access_token, safe='')}"
            f"&$filter={quote(self.filter_expr, safe='')}&$top={int(page_size)}"
        )

    async def _get(self, url: str) -> httpx.Response:
        headers = {"accept": "application/json"}
        if self._http is not None:
            return await self._http.get(url, headers=headers)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.get(url, headers=headers)

    async def fetch_page(self, cursor: str | None = None, page_size: int = 100) -> FeedPage:
        url = cursor if cursor else self.initial_url(page_size)
        log.debug("feed GET %s", redact_token(url))

        try:
            resp = await self._get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = redact_token(e.response.text[:500])
            raise FeedFetchError(
                f"failed to fetch listings: HTTP {e.response.status_code} - {body}", cause=e
            ) from e
        except httpx.HTTPError as e:
            raise FeedFetchError(
                f"failed to fetch listings: {type(e).__name__}: {redact_token(str(e))}", cause=e
            ) from e
        except httpx.InvalidURL as e:
            # only reachable through a server-supplied nextLink; ours is validated up front
            raise FeedProtocolError(
                f"feed returned an unusable next link {redact_token(url)!r}: {redact_token(str(e))}"
            ) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise FeedProtocolError("feed returned a non-JSON body") from e

        return self._parse_page(data)

    @staticmethod
    def _parse_page(data: Any) -> FeedPage:
        if not isinstance(data, dict):
            raise FeedProtocolError(f"feed returned invalid response: expected object, got {type(data).__name__}")

        records = data.get("value")
        if not isinstance(records, list):
            raise FeedProtocolError("feed returned invalid response: missing value array")

        next_link = data.get("@odata.nextLink")
        if not isinstance(next_link, str) or not next_link.strip():
            next_link = None

        count = data.get("@odata.count")
        total = count if isinstance(count, int) and not isinstance(count, bool) else None

        return FeedPage(records=records, next_cursor=next_link, total_available=total)
