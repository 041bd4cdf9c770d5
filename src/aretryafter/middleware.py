r"""Middleware that honors the Retry-After response header.

This module provides the ``RetryAfterMiddleware`` class. It sits in front
of a request handler, and when the server answers with a trigger status
code and a ``Retry-After`` header, it waits for the requested duration
and sends the identical request again.
"""

from __future__ import annotations

__all__ = ["AttemptState", "RetryAfterMiddleware"]

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from aretryafter.callbacks import RetryAfterOutcome, invoke_on_retry
from aretryafter.clock import SystemClock
from aretryafter.core.config import RetryConfig
from aretryafter.exceptions import BodyReplayError
from aretryafter.snapshot import RequestSnapshot
from aretryafter.utils.retry_after import resolve_retry_after, retry_after_from_headers
from aretryafter.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    import httpx

    from aretryafter.clock import Clock

    NextHandler = Callable[[httpx.Request], Awaitable[httpx.Response]]

logger: logging.Logger = logging.getLogger(__name__)

# Key of the RetryAfterOutcome stored in response.extensions
OUTCOME_EXTENSION = "retry_after"


@dataclass
class AttemptState:
    """Per-request retry counters.

    Attributes:
        attempts: Number of retries already made.
        total_wait: Cumulative time in seconds spent waiting.
    """

    attempts: int = 0
    total_wait: float = 0.0


class RetryAfterMiddleware:
    """Retry requests for as long as the server asks to via Retry-After.

    For each request the middleware runs a small state machine: send the
    request, evaluate the response, and either return it or wait and send
    it again. A request is resent only when all of these hold:

    - the response status is in ``config.trigger_statuses``
    - fewer than ``config.max_retries`` retries were made
    - the response carries a parsable ``Retry-After`` header
    - the wait fits in ``config.max_total_wait`` (if set)
    - the request body can be replayed

    The honored wait is clamped to ``config.max_wait``. Transport errors
    raised by the next handler are never caught. The middleware keeps no
    state between requests, so one instance can serve concurrent requests.

    Args:
        config: Retry configuration. Defaults to ``RetryConfig()``.
        clock: Time source used to resolve HTTP-dates and to wait.
            Defaults to ``SystemClock()``.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from aretryafter import FakeClock, RetryAfterMiddleware
        >>> responses = iter(
        ...     [httpx.Response(429, headers={"Retry-After": "2"}), httpx.Response(200)]
        ... )
        >>> async def send(request):
        ...     return next(responses)
        ...
        >>> clock = FakeClock()
        >>> middleware = RetryAfterMiddleware(clock=clock)
        >>> request = httpx.Request("GET", "https://api.example.com/data")
        >>> response = asyncio.run(middleware.handle(request, send))
        >>> response.status_code
        200
        >>> clock.sleeps
        [2.0]

        ```
    """

    def __init__(self, config: RetryConfig | None = None, clock: Clock | None = None) -> None:
        self.config = config if config is not None else RetryConfig()
        self.clock = clock if clock is not None else SystemClock()

    async def handle(self, request: httpx.Request, next_handler: NextHandler) -> httpx.Response:
        """Send a request through the next handler, honoring Retry-After.

        Args:
            request: The request to send.
            next_handler: Coroutine function that sends a request and
                returns its response.

        Returns:
            The last response received. Its ``extensions["retry_after"]``
            holds a ``RetryAfterOutcome`` with the retry count and the
            cumulative wait.

        Raises:
            BodyReplayError: If a retry is warranted, the body cannot be
                replayed, and ``config.raise_on_non_replayable`` is True.
            Exception: Any error raised by ``next_handler`` is propagated
                unchanged.
        """
        snapshot = RequestSnapshot.from_request(request)
        state = AttemptState()
        url, method = str(request.url), request.method

        response = await next_handler(request)
        while True:
            wait = self._next_wait(response, state, snapshot)
            if wait is None:
                break
            await response.aclose()
            invoke_on_retry(
                self.config.on_retry,
                url=url,
                method=method,
                attempt=state.attempts,
                max_retries=self.config.max_retries,
                wait_time=wait,
                status_code=response.status_code,
                total_wait=state.total_wait + wait,
            )
            log_structured(
                logger,
                logging.DEBUG,
                f"{method} request to {url} returned {response.status_code}, "
                f"retrying in {wait:.2f}s ({state.attempts + 1}/{self.config.max_retries})",
                url=url,
                method=method,
                status_code=response.status_code,
                attempt=state.attempts + 1,
                wait_time=wait,
            )
            await self.clock.sleep(wait)
            state.attempts += 1
            state.total_wait += wait
            response = await next_handler(snapshot.to_request())

        response.extensions[OUTCOME_EXTENSION] = RetryAfterOutcome(
            attempts=state.attempts, total_wait=state.total_wait
        )
        return response

    def _next_wait(
        self,
        response: httpx.Response,
        state: AttemptState,
        snapshot: RequestSnapshot,
    ) -> float | None:
        """Decide whether to retry and for how long to wait first.

        Args:
            response: The response to evaluate.
            state: The retry counters of the current request.
            snapshot: The captured request.

        Returns:
            The wait in seconds, or None if the response must be returned.

        Raises:
            BodyReplayError: If the body cannot be replayed and
                ``config.raise_on_non_replayable`` is True.
        """
        config = self.config
        if response.status_code not in config.trigger_statuses:
            return None
        if state.attempts >= config.max_retries:
            logger.debug(
                f"{snapshot.method} request to {snapshot.url} returned {response.status_code} "
                f"with no retries left ({state.attempts}/{config.max_retries})"
            )
            return None

        value = retry_after_from_headers(response.headers)
        if value is None:
            return None

        wait = resolve_retry_after(value, self.clock.now())
        if wait > config.max_wait:
            logger.debug(
                f"Capping Retry-After wait from {wait:.2f}s to {config.max_wait:.2f}s "
                f"(max_wait={config.max_wait:.2f}s)"
            )
            wait = config.max_wait

        if config.max_total_wait is not None and state.total_wait + wait > config.max_total_wait:
            logger.debug(
                f"{snapshot.method} request to {snapshot.url}: waiting {wait:.2f}s would exceed "
                f"max_total_wait={config.max_total_wait:.2f}s"
            )
            return None

        if not snapshot.is_replayable:
            message = (
                f"{snapshot.method} request to {snapshot.url} returned {response.status_code} "
                "with Retry-After but its body cannot be replayed"
            )
            if config.raise_on_non_replayable:
                raise BodyReplayError(
                    method=snapshot.method,
                    url=str(snapshot.url),
                    message=message,
                    response=response,
                )
            logger.warning(message)
            return None

        return wait
