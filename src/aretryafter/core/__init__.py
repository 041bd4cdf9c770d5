r"""Core configuration and validation for the Retry-After middleware."""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MAX_WAIT",
    "DEFAULT_TRIGGER_STATUSES",
    "RetryConfig",
    "validate_retry_params",
    "validate_trigger_statuses",
]

from aretryafter.core.config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_WAIT,
    DEFAULT_TRIGGER_STATUSES,
    RetryConfig,
)
from aretryafter.core.validation import validate_retry_params, validate_trigger_statuses
