r"""Retry-After header parsing utilities.

This module provides functions for parsing the Retry-After header value
from HTTP responses according to RFC 9110, and for resolving a parsed
value into a concrete wait duration.
"""

from __future__ import annotations

__all__ = [
    "MAX_DELAY_SECONDS",
    "RETRY_AFTER_HEADER",
    "AbsoluteTime",
    "DelaySeconds",
    "RetryAfterValue",
    "parse_retry_after",
    "resolve_retry_after",
    "retry_after_from_headers",
]

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING, Union

from aretryafter.exceptions import (
    MalformedRetryAfterError,
    RetryAfterOverflowError,
    RetryAfterParseError,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

logger: logging.Logger = logging.getLogger(__name__)

RETRY_AFTER_HEADER = "Retry-After"

# Largest delta-seconds value accepted (unsigned 64-bit range)
MAX_DELAY_SECONDS = 2**64 - 1
_MAX_DELAY_DIGITS = len(str(MAX_DELAY_SECONDS))


@dataclass(frozen=True)
class DelaySeconds:
    """Retry-After value given as a number of seconds.

    Attributes:
        seconds: The non-negative number of seconds to wait.
    """

    seconds: int


@dataclass(frozen=True)
class AbsoluteTime:
    """Retry-After value given as an HTTP-date.

    Attributes:
        timestamp: The timezone-aware UTC instant after which to retry.
    """

    timestamp: datetime


RetryAfterValue = Union[DelaySeconds, AbsoluteTime]


def parse_retry_after(raw: str) -> RetryAfterValue:
    """Parse the Retry-After header value from an HTTP response.

    The Retry-After header can be specified in two formats according to RFC 9110:
    1. An unsigned integer representing the number of seconds to wait (e.g., "120")
    2. An HTTP-date in IMF-fixdate format (e.g., "Sun, 06 Nov 1994 08:49:37 GMT")

    Args:
        raw: The value of the Retry-After header.

    Returns:
        ``DelaySeconds`` for the integer form, ``AbsoluteTime`` for the
        date form.

    Raises:
        RetryAfterOverflowError: If the integer form exceeds ``MAX_DELAY_SECONDS``.
        MalformedRetryAfterError: If the value matches neither format. Empty
            strings, signed numbers and fractions are rejected.

    Example:
        ```pycon
        >>> from aretryafter.utils import parse_retry_after
        >>> parse_retry_after("120")
        DelaySeconds(seconds=120)
        >>> parse_retry_after("Sun, 06 Nov 1994 08:49:37 GMT")
        AbsoluteTime(timestamp=datetime.datetime(1994, 11, 6, 8, 49, 37, tzinfo=datetime.timezone.utc))

        ```
    """
    if not raw:
        raise MalformedRetryAfterError(raw, "Retry-After value is empty")

    if raw.isascii() and raw.isdigit():
        if len(raw.lstrip("0")) > _MAX_DELAY_DIGITS or int(raw) > MAX_DELAY_SECONDS:
            msg = f"Retry-After value {raw!r} exceeds {MAX_DELAY_SECONDS} seconds"
            raise RetryAfterOverflowError(raw, msg)
        return DelaySeconds(int(raw))

    try:
        retry_date = parsedate_to_datetime(raw)
        # "-0000" zones come back naive; HTTP-dates are always UTC
        if retry_date.tzinfo is None:
            retry_date = retry_date.replace(tzinfo=timezone.utc)
        # Dates at the edge of the datetime range can overflow once shifted to UTC
        retry_date = retry_date.astimezone(timezone.utc)
    except (ValueError, TypeError, IndexError, OverflowError) as exc:
        msg = f"Retry-After value {raw!r} is neither delta-seconds nor an HTTP-date"
        raise MalformedRetryAfterError(raw, msg) from exc
    return AbsoluteTime(retry_date)


def resolve_retry_after(value: RetryAfterValue, now: datetime) -> float:
    """Resolve a parsed Retry-After value into a wait duration.

    The result depends only on the arguments, so calling it twice with the
    same inputs returns the same duration.

    Args:
        value: The parsed Retry-After value.
        now: The current time as a timezone-aware datetime.

    Returns:
        The number of seconds to wait. Dates in the past resolve to 0.0.

    Example:
        ```pycon
        >>> from datetime import datetime, timezone
        >>> from aretryafter.utils import AbsoluteTime, DelaySeconds, resolve_retry_after
        >>> now = datetime(2015, 10, 21, 7, 28, 0, tzinfo=timezone.utc)
        >>> resolve_retry_after(DelaySeconds(5), now)
        5.0
        >>> resolve_retry_after(AbsoluteTime(datetime(2015, 10, 21, 7, 29, 0, tzinfo=timezone.utc)), now)
        60.0
        >>> resolve_retry_after(AbsoluteTime(datetime(2015, 10, 21, 7, 0, 0, tzinfo=timezone.utc)), now)
        0.0

        ```
    """
    if isinstance(value, DelaySeconds):
        return float(value.seconds)
    return max(0.0, (value.timestamp - now).total_seconds())


def retry_after_from_headers(headers: Mapping[str, str]) -> RetryAfterValue | None:
    """Look up and parse the Retry-After header.

    Args:
        headers: The response headers. Lookups on ``httpx.Headers`` are
            case-insensitive.

    Returns:
        The parsed value, or None if the header is missing or cannot be
        parsed.
    """
    raw = headers.get(RETRY_AFTER_HEADER)
    if raw is None:
        return None
    try:
        return parse_retry_after(raw)
    except RetryAfterParseError as exc:
        logger.debug(f"Failed to parse Retry-After header: {exc}")
        return None
