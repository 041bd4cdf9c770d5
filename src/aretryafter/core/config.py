r"""Configuration dataclass and defaults for the Retry-After middleware.

This module provides configuration constants and an immutable
configuration object shared by every request that goes through one
middleware instance.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MAX_WAIT",
    "DEFAULT_TRIGGER_STATUSES",
    "RetryConfig",
]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from aretryafter.core.validation import validate_retry_params, validate_trigger_statuses

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretryafter.callbacks import RetryInfo


# Default maximum number of header-driven retries
# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 3

# Default ceiling in seconds on a single honored Retry-After value
# Longer server requests are clamped to this value
DEFAULT_MAX_WAIT = 60.0

# HTTP status codes that make the middleware look at Retry-After
# 429: Too Many Requests - Rate limiting
# 503: Service Unavailable - Server overloaded or under maintenance
DEFAULT_TRIGGER_STATUSES = frozenset({429, 503})


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for Retry-After driven retries.

    All options are validated at construction time. Instances are
    immutable, so one config can be shared by concurrent requests.

    Args:
        max_retries: Maximum number of retries per request. Must be >= 0.
        max_wait: Ceiling in seconds on any single honored Retry-After
            value. Must be > 0.
        trigger_statuses: HTTP status codes that are eligible for
            header-driven retry.
        max_total_wait: Optional cap in seconds on the cumulative wait of
            one request. Must be > 0 if provided.
        raise_on_non_replayable: If True, raise ``BodyReplayError`` when a
            retry is warranted but the request body cannot be replayed.
            Otherwise the response is returned unchanged.
        on_retry: Optional callback called before each wait.

    Example:
        ```pycon
        >>> from aretryafter.core.config import RetryConfig
        >>> config = RetryConfig()  # Use defaults
        >>> config.max_retries
        3
        >>> sorted(config.trigger_statuses)
        [429, 503]
        >>> merged = config.merge(max_retries=10)  # Override specific parameters
        >>> merged.max_retries
        10
        >>> config.max_retries  # Original unchanged
        3

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    max_wait: float = DEFAULT_MAX_WAIT
    trigger_statuses: frozenset[int] = field(default_factory=lambda: DEFAULT_TRIGGER_STATUSES)
    max_total_wait: float | None = None
    raise_on_non_replayable: bool = False
    on_retry: Callable[[RetryInfo], None] | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_retry_params(
            max_retries=self.max_retries,
            max_wait=self.max_wait,
            max_total_wait=self.max_total_wait,
        )
        # Accept any iterable of status codes but store a frozenset
        object.__setattr__(self, "trigger_statuses", frozenset(self.trigger_statuses))
        validate_trigger_statuses(self.trigger_statuses)

    def merge(self, **overrides: Any) -> RetryConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied. The new config is
        validated like any other.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new RetryConfig instance with overrides applied.

        Example:
            ```pycon
            >>> from aretryafter.core.config import RetryConfig
            >>> config = RetryConfig(max_wait=30.0)
            >>> config.merge(max_wait=5.0).max_wait
            5.0
            >>> config.merge(max_wait=None).max_wait
            30.0

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
