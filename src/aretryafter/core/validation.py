r"""Parameter validation utilities for the Retry-After middleware.

This module provides validation functions for retry parameters to ensure
they meet the required constraints before the middleware uses them.
"""

from __future__ import annotations

__all__ = ["validate_retry_params", "validate_trigger_statuses"]

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def validate_trigger_statuses(trigger_statuses: Iterable[int]) -> None:
    """Validate the set of status codes that trigger retry
    consideration.

    Args:
        trigger_statuses: The HTTP status codes to validate.

    Raises:
        ValueError: If a status code is not an integer in the range 100-599.

    Example:
        ```pycon
        >>> from aretryafter.core.validation import validate_trigger_statuses
        >>> validate_trigger_statuses({429, 503})
        >>> validate_trigger_statuses({42})  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: trigger_statuses must contain HTTP status codes (100-599), got 42

        ```
    """
    for status in trigger_statuses:
        if isinstance(status, bool) or not isinstance(status, int) or not 100 <= status <= 599:
            msg = f"trigger_statuses must contain HTTP status codes (100-599), got {status!r}"
            raise ValueError(msg)


def validate_retry_params(
    max_retries: int,
    max_wait: float,
    max_total_wait: float | None = None,
) -> None:
    """Validate retry parameters.

    Args:
        max_retries: Maximum number of retry attempts.
            Must be >= 0. A value of 0 means no retries (only the initial attempt).
        max_wait: Ceiling in seconds for a single honored Retry-After wait.
            Must be finite and > 0.
        max_total_wait: Maximum cumulative wait in seconds for one request.
            Must be finite and > 0 if provided.

    Raises:
        TypeError: If max_retries is not an integer.
        ValueError: If max_retries is negative, or if max_wait or
            max_total_wait are not finite positive numbers.

    Example:
        ```pycon
        >>> from aretryafter.core import validate_retry_params
        >>> validate_retry_params(max_retries=3, max_wait=60.0)
        >>> validate_retry_params(max_retries=0, max_wait=1.0, max_total_wait=10.0)
        >>> validate_retry_params(max_retries=-1, max_wait=60.0)  # doctest: +SKIP

        ```
    """
    if isinstance(max_retries, bool) or not isinstance(max_retries, int):
        msg = f"max_retries must be an integer, got {max_retries!r}"
        raise TypeError(msg)
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if not (max_wait > 0 and math.isfinite(max_wait)):
        msg = f"max_wait must be > 0, got {max_wait}"
        raise ValueError(msg)
    if max_total_wait is not None and not (max_total_wait > 0 and math.isfinite(max_total_wait)):
        msg = f"max_total_wait must be > 0, got {max_total_wait}"
        raise ValueError(msg)
