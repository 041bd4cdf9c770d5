r"""Callback types and data structures for observability.

This module lets users hook into the retry lifecycle for logging,
metrics or alerting. The ``on_retry`` callback is invoked right before
the middleware waits for the duration requested by the server.

Example:
    ```pycon
    >>> from aretryafter.callbacks import RetryInfo
    >>> from aretryafter.core import RetryConfig
    >>> def log_retry(retry_info: RetryInfo):
    ...     print(f"Retry {retry_info.attempt}/{retry_info.max_retries} in {retry_info.wait_time}s")
    ...
    >>> config = RetryConfig(on_retry=log_retry)

    ```
"""

from __future__ import annotations

__all__ = ["RetryAfterOutcome", "RetryInfo", "invoke_on_retry"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class RetryInfo:
    """Information passed to on_retry callback.

    Attributes:
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The retry about to be made (1-indexed). The first retry is 1.
        max_retries: Maximum number of retry attempts configured.
        wait_time: The time in seconds the middleware will wait.
        status_code: The HTTP status code that triggered the retry.
        total_wait: Cumulative wait in seconds including this one.
    """

    url: str
    method: str
    attempt: int
    max_retries: int
    wait_time: float
    status_code: int
    total_wait: float


@dataclass(frozen=True)
class RetryAfterOutcome:
    """Summary of the retries performed for one request.

    The middleware stores it in ``response.extensions["retry_after"]``.

    Attributes:
        attempts: Number of retries performed.
        total_wait: Cumulative time in seconds spent waiting.
    """

    attempts: int
    total_wait: float


def invoke_on_retry(
    on_retry: Callable[[RetryInfo], None] | None,
    *,
    url: str,
    method: str,
    attempt: int,
    max_retries: int,
    wait_time: float,
    status_code: int,
    total_wait: float,
) -> None:
    """Invoke on_retry callback if provided.

    Args:
        on_retry: Optional callback to invoke before each wait.
        url: The URL being requested.
        method: The HTTP method (e.g., "GET", "POST").
        attempt: The number of retries already made (0-indexed internally).
            The callback receives this as a 1-indexed value (attempt + 1).
        max_retries: Maximum number of retry attempts.
        wait_time: The time in seconds before the retry.
        status_code: The HTTP status code that triggered the retry.
        total_wait: Cumulative wait in seconds including this one.
    """
    if on_retry is not None:
        on_retry(
            RetryInfo(
                url=url,
                method=method,
                attempt=attempt + 1,
                max_retries=max_retries,
                wait_time=wait_time,
                status_code=status_code,
                total_wait=total_wait,
            )
        )
