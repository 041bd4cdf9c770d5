r"""Unit tests for RequestSnapshot."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from aretryafter.exceptions import BodyReplayError
from aretryafter.snapshot import BodyKind, RequestSnapshot

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

TEST_URL = "https://api.example.com/items"


async def _chunks() -> AsyncIterator[bytes]:
    yield b"chunk-1"
    yield b"chunk-2"


#########################################
#     Tests for RequestSnapshot         #
#########################################


def test_snapshot_empty_body() -> None:
    snapshot = RequestSnapshot.from_request(httpx.Request("GET", TEST_URL))
    assert snapshot.body_kind is BodyKind.EMPTY
    assert snapshot.body == b""
    assert snapshot.is_replayable


def test_snapshot_buffered_body() -> None:
    request = httpx.Request("POST", TEST_URL, json={"name": "widget"})
    snapshot = RequestSnapshot.from_request(request)
    assert snapshot.body_kind is BodyKind.BUFFERED
    assert snapshot.body == request.content
    assert snapshot.is_replayable


def test_snapshot_streaming_body_is_non_replayable() -> None:
    snapshot = RequestSnapshot.from_request(httpx.Request("POST", TEST_URL, content=_chunks()))
    assert snapshot.body_kind is BodyKind.NON_REPLAYABLE
    assert not snapshot.is_replayable


@pytest.mark.asyncio
async def test_snapshot_streaming_body_read_is_buffered() -> None:
    request = httpx.Request("POST", TEST_URL, content=_chunks())
    await request.aread()
    snapshot = RequestSnapshot.from_request(request)
    assert snapshot.body_kind is BodyKind.BUFFERED
    assert snapshot.body == b"chunk-1chunk-2"


def test_snapshot_copies_headers() -> None:
    request = httpx.Request("GET", TEST_URL, headers={"Authorization": "Bearer token"})
    snapshot = RequestSnapshot.from_request(request)
    request.headers["Authorization"] = "changed"
    assert snapshot.headers["Authorization"] == "Bearer token"


def test_snapshot_to_request_identical() -> None:
    request = httpx.Request(
        "PUT",
        TEST_URL,
        params={"page": "2"},
        headers={"X-Trace": "abc"},
        content=b"payload",
        extensions={"timeout": {"connect": 1.0}},
    )
    replay = RequestSnapshot.from_request(request).to_request()
    assert replay is not request
    assert replay.method == "PUT"
    assert replay.url == request.url
    assert replay.headers["X-Trace"] == "abc"
    assert replay.headers["Content-Length"] == "7"
    assert replay.content == b"payload"
    assert replay.extensions == {"timeout": {"connect": 1.0}}


def test_snapshot_to_request_empty_body() -> None:
    replay = RequestSnapshot.from_request(httpx.Request("DELETE", TEST_URL)).to_request()
    assert replay.method == "DELETE"
    assert replay.content == b""


def test_snapshot_to_request_non_replayable() -> None:
    snapshot = RequestSnapshot.from_request(httpx.Request("POST", TEST_URL, content=_chunks()))
    with pytest.raises(BodyReplayError, match=r"cannot be replayed") as exc_info:
        snapshot.to_request()
    assert exc_info.value.method == "POST"
    assert exc_info.value.url == TEST_URL
    assert exc_info.value.response is None
