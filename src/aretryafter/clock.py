r"""Time sources used by the Retry-After middleware.

The middleware never reads the wall clock or sleeps directly. It goes
through a ``Clock`` so that tests can simulate waiting without real
delays.
"""

from __future__ import annotations

__all__ = ["Clock", "FakeClock", "SystemClock"]

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Source of the current time and of cancellable suspension."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time.

        Returns:
            A timezone-aware datetime in UTC.
        """

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Suspend the calling task for ``seconds`` seconds.

        The suspension yields to the event loop and is aborted with
        ``asyncio.CancelledError`` when the task is cancelled.

        Args:
            seconds: The non-negative number of seconds to wait.
        """


class SystemClock(Clock):
    """Clock backed by the system time and ``asyncio.sleep``.

    Example:
        ```pycon
        >>> from aretryafter.clock import SystemClock
        >>> clock = SystemClock()
        >>> clock.now().tzinfo
        datetime.timezone.utc

        ```
    """

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class FakeClock(Clock):
    """Deterministic clock that advances instantly.

    Every call to ``sleep`` records the requested duration and moves the
    clock forward by that amount. The task still yields once to the event
    loop, so cancellation behaves as with a real clock.

    Args:
        start: The initial time. Defaults to 2000-01-01T00:00:00Z.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretryafter.clock import FakeClock
        >>> clock = FakeClock()
        >>> asyncio.run(clock.sleep(2.0))
        >>> clock.sleeps
        [2.0]
        >>> clock.now().isoformat()
        '2000-01-01T00:00:02+00:00'

        ```
    """

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start if start is not None else datetime(2000, 1, 1, tzinfo=timezone.utc)
        self.sleeps: list[float] = []

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move the clock forward without recording a sleep.

        Args:
            seconds: The number of seconds to advance.
        """
        self._now += timedelta(seconds=seconds)

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        await asyncio.sleep(0)
        self.advance(seconds)
