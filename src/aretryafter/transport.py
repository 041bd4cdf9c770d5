r"""httpx transport that honors the Retry-After response header.

This module plugs ``RetryAfterMiddleware`` into httpx. The transport
wraps another async transport, which acts as the next handler of the
middleware.

Example:
    ```pycon
    >>> import httpx
    >>> from aretryafter import RetryAfterTransport
    >>> from aretryafter.core import RetryConfig
    >>> client = httpx.AsyncClient(
    ...     transport=RetryAfterTransport(config=RetryConfig(max_retries=5, max_wait=30.0))
    ... )  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = ["RetryAfterTransport"]

from typing import TYPE_CHECKING

import httpx

from aretryafter.middleware import RetryAfterMiddleware

if TYPE_CHECKING:
    from aretryafter.clock import Clock
    from aretryafter.core.config import RetryConfig


class RetryAfterTransport(httpx.AsyncBaseTransport):
    """Async transport that waits and resends when asked via Retry-
    After.

    Args:
        transport: The transport that actually sends requests.
            Defaults to ``httpx.AsyncHTTPTransport()``.
        config: Retry configuration. Defaults to ``RetryConfig()``.
        clock: Time source. Defaults to ``SystemClock()``.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        *,
        config: RetryConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._transport = transport if transport is not None else httpx.AsyncHTTPTransport()
        self.middleware = RetryAfterMiddleware(config=config, clock=clock)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self.middleware.handle(request, self._transport.handle_async_request)

    async def aclose(self) -> None:
        await self._transport.aclose()
