r"""End-to-end tests for RetryAfterTransport with httpx.AsyncClient."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from aretryafter import RetryAfterOutcome, RetryAfterTransport
from aretryafter.clock import FakeClock
from aretryafter.core import RetryConfig

TEST_URL = "https://api.example.com/data"


class ScriptedServer:
    """Answer requests with a fixed sequence of responses and record
    them."""

    def __init__(self, *responses: httpx.Response) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responses.pop(0)


def make_client(server: ScriptedServer, clock: FakeClock, **config: object) -> httpx.AsyncClient:
    transport = RetryAfterTransport(
        httpx.MockTransport(server), config=RetryConfig(**config), clock=clock
    )
    return httpx.AsyncClient(transport=transport)


##########################################
#     Tests for RetryAfterTransport      #
##########################################


def test_transport_default_wrapped_transport() -> None:
    transport = RetryAfterTransport()
    assert isinstance(transport._transport, httpx.AsyncHTTPTransport)
    assert transport.middleware.config == RetryConfig()


@pytest.mark.asyncio
async def test_transport_retries_then_succeeds(fake_clock: FakeClock) -> None:
    server = ScriptedServer(
        httpx.Response(429, headers={"Retry-After": "2"}),
        httpx.Response(200, json={"ok": True}),
    )

    async with make_client(server, fake_clock) as client:
        response = await client.get(TEST_URL)

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert fake_clock.sleeps == [2.0]
    assert len(server.requests) == 2
    assert response.extensions["retry_after"] == RetryAfterOutcome(attempts=1, total_wait=2.0)


@pytest.mark.asyncio
async def test_transport_returns_429_without_header(fake_clock: FakeClock) -> None:
    server = ScriptedServer(httpx.Response(429, text="slow down"))

    async with make_client(server, fake_clock) as client:
        response = await client.get(TEST_URL)

    assert response.status_code == 429
    assert response.text == "slow down"
    assert fake_clock.sleeps == []
    assert len(server.requests) == 1


@pytest.mark.asyncio
async def test_transport_max_retries_zero(fake_clock: FakeClock) -> None:
    server = ScriptedServer(httpx.Response(429, headers={"Retry-After": "5"}))

    async with make_client(server, fake_clock, max_retries=0) as client:
        response = await client.get(TEST_URL)

    assert response.status_code == 429
    assert fake_clock.sleeps == []


@pytest.mark.asyncio
async def test_transport_replays_json_body(fake_clock: FakeClock) -> None:
    server = ScriptedServer(
        httpx.Response(503, headers={"Retry-After": "1"}),
        httpx.Response(201),
    )

    async with make_client(server, fake_clock) as client:
        response = await client.post(TEST_URL, json={"name": "widget"}, headers={"X-Trace": "t1"})

    assert response.status_code == 201
    first, second = server.requests
    assert json.loads(second.content) == json.loads(first.content) == {"name": "widget"}
    assert second.headers["X-Trace"] == "t1"
    assert second.method == first.method == "POST"
    assert second.url == first.url


@pytest.mark.asyncio
async def test_transport_stops_at_last_response(fake_clock: FakeClock) -> None:
    server = ScriptedServer(
        *(httpx.Response(429, headers={"Retry-After": "1"}) for _ in range(3)),
    )

    async with make_client(server, fake_clock, max_retries=2) as client:
        response = await client.get(TEST_URL)

    assert response.status_code == 429
    assert len(server.requests) == 3
    assert fake_clock.sleeps == [1.0, 1.0]


@pytest.mark.asyncio
async def test_transport_error_propagates(fake_clock: FakeClock) -> None:
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = RetryAfterTransport(httpx.MockTransport(fail), clock=fake_clock)
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(httpx.ConnectError):
            await client.get(TEST_URL)

    assert fake_clock.sleeps == []


@pytest.mark.asyncio
async def test_transport_aclose_closes_wrapped() -> None:
    wrapped = Mock(spec=httpx.AsyncBaseTransport, aclose=AsyncMock())
    transport = RetryAfterTransport(wrapped)

    await transport.aclose()

    wrapped.aclose.assert_awaited_once()
