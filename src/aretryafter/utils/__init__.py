r"""Utility functions for Retry-After handling.

This package provides the Retry-After header parser and the opt-in
structured logging helpers.
"""

from __future__ import annotations

__all__ = [
    "AbsoluteTime",
    "DelaySeconds",
    "RetryAfterValue",
    "parse_retry_after",
    "resolve_retry_after",
    "retry_after_from_headers",
]

from aretryafter.utils.retry_after import (
    AbsoluteTime,
    DelaySeconds,
    RetryAfterValue,
    parse_retry_after,
    resolve_retry_after,
    retry_after_from_headers,
)
