r"""aretryafter - Retry-After support for httpx.

This package makes an httpx async client honor the ``Retry-After``
response header transparently. When a server answers with a trigger
status code (429 or 503 by default) and a ``Retry-After`` header, the
request is paused for the indicated interval and sent again.

Key Features:
    - Retry-After parsing in both forms (delta-seconds and HTTP-date)
    - Bounded retries and a ceiling on every honored wait
    - Safe replay: requests with one-shot streaming bodies are never resent
    - Non-blocking, cancellable waits through an injectable clock
    - Callback and structured logging hooks for observability

Example:
    ```pycon
    >>> import httpx
    >>> from aretryafter import RetryAfterTransport
    >>> async def main():  # doctest: +SKIP
    ...     async with httpx.AsyncClient(transport=RetryAfterTransport()) as client:
    ...         response = await client.get("https://api.example.com/data")
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "BodyReplayError",
    "Clock",
    "FakeClock",
    "RetryAfterMiddleware",
    "RetryAfterOutcome",
    "RetryAfterParseError",
    "RetryAfterTransport",
    "RetryConfig",
    "SystemClock",
    "__version__",
    "parse_retry_after",
    "resolve_retry_after",
]

from importlib.metadata import PackageNotFoundError, version

from aretryafter.callbacks import RetryAfterOutcome
from aretryafter.clock import Clock, FakeClock, SystemClock
from aretryafter.core.config import RetryConfig
from aretryafter.exceptions import BodyReplayError, RetryAfterParseError
from aretryafter.middleware import RetryAfterMiddleware
from aretryafter.transport import RetryAfterTransport
from aretryafter.utils.retry_after import parse_retry_after, resolve_retry_after

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
