r"""Exceptions raised by the Retry-After middleware.

This module defines the error taxonomy of the package. Parse errors are
recovered by the middleware and only reach callers that use the parser
directly. ``BodyReplayError`` is raised when a retry is warranted but the
request body cannot be sent a second time.
"""

from __future__ import annotations

__all__ = [
    "BodyReplayError",
    "MalformedRetryAfterError",
    "RetryAfterError",
    "RetryAfterOverflowError",
    "RetryAfterParseError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class RetryAfterError(Exception):
    """Base class for all errors raised by this package."""


class RetryAfterParseError(RetryAfterError, ValueError):
    """Raised when a ``Retry-After`` header value cannot be parsed.

    Args:
        value: The raw header value that failed to parse.
        message: Human-readable error message.

    Example:
        ```pycon
        >>> from aretryafter.exceptions import RetryAfterParseError
        >>> error = RetryAfterParseError("soon", "invalid Retry-After value")
        >>> error.value
        'soon'

        ```
    """

    def __init__(self, value: str, message: str) -> None:
        super().__init__(message)
        self.value = value


class MalformedRetryAfterError(RetryAfterParseError):
    """Raised when the value is neither delta-seconds nor an HTTP-
    date."""


class RetryAfterOverflowError(RetryAfterParseError):
    """Raised when the delta-seconds value exceeds the supported
    range."""


class BodyReplayError(RetryAfterError):
    """Raised when a request should be resent but its body is not
    replayable.

    The original response is kept on the exception so that callers never
    lose the context the server sent back.

    Args:
        method: The HTTP method of the request.
        url: The URL of the request.
        message: Human-readable error message.
        response: The response that asked for a retry, if any.

    Example:
        ```pycon
        >>> from aretryafter.exceptions import BodyReplayError
        >>> error = BodyReplayError(
        ...     method="POST",
        ...     url="https://api.example.com/upload",
        ...     message="request body is a consumed stream",
        ... )
        >>> error.method
        'POST'
        >>> error.status_code is None
        True

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.response = response
        self.status_code = response.status_code if response is not None else None
