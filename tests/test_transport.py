"""
Tests for providers/transport.py: HttpTransport retry policy.

Covers:
  - Query parameters and headers are forwarded
  - Timeouts, connection errors and 5xx are retried with exponential backoff
  - 4xx fails immediately
  - The last error is re-raised once retries are exhausted
"""
import httpx
import pytest

from epgsync.providers import transport as transport_module
from epgsync.providers.transport import HttpTransport


BASE_URL = "https://epg.example.test"


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    """Record backoff waits instead of sleeping."""
    recorded: list[float] = []

    async def _fake_sleep(seconds: float) -> None:
        recorded.append(seconds)

    monkeypatch.setattr(transport_module.asyncio, "sleep", _fake_sleep)
    return recorded


def _transport(handler, **kwargs) -> HttpTransport:
    return HttpTransport(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_returns_body_and_forwards_query_and_headers():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"payload")

    client = _transport(handler)
    body = await client.get_with_headers("/path", {"page": "2"}, {"Sign": "abc"})
    await client.aclose()

    assert body == b"payload"
    assert seen[0].url == httpx.URL(f"{BASE_URL}/path?page=2")
    assert seen[0].headers["Sign"] == "abc"


@pytest.mark.asyncio
async def test_server_errors_are_retried_with_backoff(sleeps):
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) < 3:
            return httpx.Response(503)
        return httpx.Response(200, content=b"ok")

    body = await _transport(handler, max_retries=3, backoff_factor=2.0).get_with_headers("/p")

    assert body == b"ok"
    assert len(attempts) == 3
    assert sleeps == [1.0, 2.0]


@pytest.mark.asyncio
async def test_client_errors_are_not_retried(sleeps):
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(404)

    with pytest.raises(httpx.HTTPStatusError):
        await _transport(handler, max_retries=3).get_with_headers("/p")

    assert len(attempts) == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_connect_errors_exhaust_retries_and_reraise(sleeps):
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(httpx.ConnectError):
        await _transport(handler, max_retries=3, backoff_factor=3.0).get_with_headers("/p")

    assert len(attempts) == 3
    assert sleeps == [1.0, 3.0]


@pytest.mark.asyncio
async def test_timeouts_are_retried(sleeps):
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ReadTimeout("slow", request=request)
        return httpx.Response(200, content=b"ok")

    assert await _transport(handler, max_retries=2).get_with_headers("/p") == b"ok"
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_persistent_server_error_is_reraised(sleeps):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        await _transport(handler, max_retries=2).get_with_headers("/p")

    assert exc_info.value.response.status_code == 500
    assert sleeps == [1.0]
