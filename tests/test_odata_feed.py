import httpx
import pytest

from feedsync.adapters.clients.odata_feed import ODataFeedClient, redact_token
from feedsync.errors import FeedConfigError, FeedFetchError, FeedProtocolError

FEED_URL = "https://api.example.com/api/v2/OData/har/Property?access_token=SECRET123"


def _client(handler, **kw) -> tuple[ODataFeedClient, httpx.AsyncClient]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ODataFeedClient(FEED_URL, filter_expr="City eq 'Houston'", http_client=http, **kw), http


@pytest.mark.parametrize(
    "url",
    [
        None,
        "",
        "https://api.example.com/api/v2/OData/har/Property",
        "https://api.example.com/api/v2/OData/har/Property?access_token=",
        "https://api.example.com/api/v2/har/listings?access_token=abc",
    ],
)
def test_bad_feed_urls_are_rejected(url):
    with pytest.raises(FeedConfigError):
        ODataFeedClient(url, filter_expr="x")


def test_initial_url_carries_token_filter_and_page_size():
    client = ODataFeedClient(FEED_URL, filter_expr="(City eq 'Houston')")
    url = client.initial_url(50)

    assert url.startswith("https://api.example.com/api/v2/OData/har/Property?")
    assert "access_token=SECRET123" in url
    assert "$filter=%28City%20eq%20%27Houston%27%29" in url
    assert url.endswith("$top=50")


@pytest.mark.asyncio
async def test_first_page_parsed():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "@odata.count": 150,
                "@odata.nextLink": "https://api.example.com/next?page=2&access_token=SECRET123",
                "value": [{"ListingId": "1"}, {"ListingId": "2"}],
            },
        )

    client, http = _client(handler)
    async with http:
        page = await client.fetch_page(None, 2)

    assert len(seen) == 1
    assert seen[0].url.params["$top"] == "2"
    assert [r["ListingId"] for r in page.records] == ["1", "2"]
    assert page.total_available == 150
    assert page.next_cursor == "https://api.example.com/next?page=2&access_token=SECRET123"


@pytest.mark.asyncio
async def test_cursor_followed_verbatim():
    seen: list[httpx.URL] = []
    next_link = "https://api.example.com/api/v2/OData/har/Property?$skip=100&access_token=SECRET123"

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url)
        return httpx.Response(200, json={"value": []})

    client, http = _client(handler)
    async with http:
        page = await client.fetch_page(next_link, 100)

    assert len(seen) == 1
    # no $top/$filter added on top of the server's link
    assert dict(seen[0].params) == {"$skip": "100", "access_token": "SECRET123"}
    assert page.records == []
    assert page.next_cursor is None
    assert page.total_available is None


@pytest.mark.asyncio
async def test_http_error_maps_to_fetch_error_without_token():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="upstream broke for access_token=SECRET123")

    client, http = _client(handler)
    async with http:
        with pytest.raises(FeedFetchError) as ei:
            await client.fetch_page()

    msg = str(ei.value)
    assert "HTTP 500" in msg
    assert "SECRET123" not in msg
    assert isinstance(ei.value.cause, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_transport_error_maps_to_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, http = _client(handler)
    async with http:
        with pytest.raises(FeedFetchError):
            await client.fetch_page()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"error": "nope"},
        {"value": "not-a-list"},
        [1, 2, 3],
    ],
)
async def test_missing_value_array_is_protocol_error(body):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    client, http = _client(handler)
    async with http:
        with pytest.raises(FeedProtocolError):
            await client.fetch_page()


@pytest.mark.asyncio
async def test_non_json_body_is_protocol_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    client, http = _client(handler)
    async with http:
        with pytest.raises(FeedProtocolError):
            await client.fetch_page()


@pytest.mark.asyncio
async def test_non_integer_count_is_ignored():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"@odata.count": "150", "value": [{"ListingId": "1"}]})

    client, http = _client(handler)
    async with http:
        page = await client.fetch_page()

    assert page.total_available is None


def test_redact_token():
    assert redact_token(FEED_URL) == "https://api.example.com/api/v2/OData/har/Property?access_token=***"
    assert redact_token("a?x=1&access_token=abc&y=2") == "a?x=1&access_token=***&y=2"
    assert redact_token("no token here") == "no token here"


@pytest.mark.asyncio
async def test_malformed_next_link_is_protocol_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"value": []})

    client, http = _client(handler)
    async with http:
        with pytest.raises(FeedProtocolError) as ei:
            await client.fetch_page("http://[::1/odata?access_token=SECRET123")

    assert "SECRET123" not in str(ei.value)
