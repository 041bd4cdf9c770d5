r"""Structured logging utilities for machine-readable log output.

The middleware logs its retry decisions through ``log_structured``, which
attaches fields such as the URL, status code and wait time to the log
record. Plain formatters ignore these fields. ``StructuredFormatter``
renders them as one JSON object per line, which suits log aggregation
systems.

Example:
    Enable JSON output for aretryafter:

    ```python
    import logging
    from aretryafter.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("aretryafter")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```
"""

from __future__ import annotations

__all__ = ["StructuredFormatter", "log_structured"]

import json
import logging
import time
from typing import Any

# Attributes every LogRecord has; anything else came from ``extra``
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Output fields: ``timestamp`` (ISO 8601, UTC), ``level``, ``logger``,
    ``message``, ``module``, ``function``, ``line``, ``exception`` when
    present, plus every field passed through ``extra``.

    Example:
        ```pycon
        >>> import logging
        >>> from io import StringIO
        >>> from aretryafter.utils.structured_logging import StructuredFormatter, log_structured
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_structured")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.DEBUG)
        >>> log_structured(logger, logging.DEBUG, "retrying", status_code=429)
        >>> '"status_code": 429' in stream.getvalue()
        True

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format timestamp as ISO 8601 in UTC with millisecond precision.

        Args:
            record: The log record.
            datefmt: Ignored.

        Returns:
            ISO 8601 formatted timestamp.
        """
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """Log a message with structured data.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.DEBUG).
        message: Log message.
        **extra: Additional structured fields to include in the log.
    """
    logger.log(level, message, extra=extra)
