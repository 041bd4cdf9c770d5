r"""Replayable captures of outgoing HTTP requests.

Resending "the identical request" needs the request as plain data that
does not depend on a one-shot resource such as a streaming body. This
module captures an ``httpx.Request`` into a ``RequestSnapshot`` and
rebuilds fresh requests from it.
"""

from __future__ import annotations

__all__ = ["BodyKind", "RequestSnapshot"]

import enum
from dataclasses import dataclass, field
from typing import Any

import httpx

from aretryafter.exceptions import BodyReplayError


class BodyKind(enum.Enum):
    """Kind of request body held by a snapshot."""

    EMPTY = "empty"
    BUFFERED = "buffered"
    NON_REPLAYABLE = "non-replayable"


@dataclass(frozen=True)
class RequestSnapshot:
    """Data needed to reissue an identical request.

    Attributes:
        method: The HTTP method.
        url: The request URL.
        headers: A copy of the request headers.
        body_kind: Whether the body is empty, buffered or non-replayable.
        body: The buffered body bytes. Empty unless ``body_kind`` is
            ``BodyKind.BUFFERED``.
        extensions: A copy of the request extensions (timeouts, etc.).

    Example:
        ```pycon
        >>> import httpx
        >>> from aretryafter.snapshot import RequestSnapshot
        >>> request = httpx.Request("POST", "https://api.example.com/items", content=b"{}")
        >>> snapshot = RequestSnapshot.from_request(request)
        >>> snapshot.body_kind.value
        'buffered'
        >>> snapshot.to_request().content
        b'{}'

        ```
    """

    method: str
    url: httpx.URL
    headers: httpx.Headers
    body_kind: BodyKind
    body: bytes = b""
    extensions: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_request(cls, request: httpx.Request) -> RequestSnapshot:
        """Capture a request without consuming its body.

        Bodies that httpx already holds in memory are buffered. Streaming
        bodies that have not been read are marked non-replayable.

        Args:
            request: The request to capture.

        Returns:
            The snapshot of the request.
        """
        try:
            content = request.content
        except httpx.RequestNotRead:
            body_kind, content = BodyKind.NON_REPLAYABLE, b""
        else:
            body_kind = BodyKind.BUFFERED if content else BodyKind.EMPTY
        return cls(
            method=request.method,
            url=request.url,
            headers=request.headers.copy(),
            body_kind=body_kind,
            body=content,
            extensions=dict(request.extensions),
        )

    @property
    def is_replayable(self) -> bool:
        """Indicate whether the request can be sent again."""
        return self.body_kind is not BodyKind.NON_REPLAYABLE

    def to_request(self) -> httpx.Request:
        """Build a new request identical to the captured one.

        Returns:
            A fresh ``httpx.Request``.

        Raises:
            BodyReplayError: If the body is non-replayable.
        """
        if not self.is_replayable:
            raise BodyReplayError(
                method=self.method,
                url=str(self.url),
                message=f"{self.method} request to {self.url} has a streaming body that cannot be replayed",
            )
        return httpx.Request(
            self.method,
            self.url,
            headers=self.headers.copy(),
            content=self.body if self.body_kind is BodyKind.BUFFERED else None,
            extensions=dict(self.extensions),
        )
