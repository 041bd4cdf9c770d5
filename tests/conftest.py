from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from aretryafter.clock import FakeClock

if TYPE_CHECKING:
    from collections.abc import Generator

TEST_URL = "https://api.example.com/data"


@pytest.fixture
def fake_clock() -> FakeClock:
    """Create a FakeClock starting at a fixed instant."""
    return FakeClock(start=datetime(2015, 10, 21, 7, 28, 0, tzinfo=timezone.utc))


@pytest.fixture
def get_request() -> httpx.Request:
    """Create a body-less GET request."""
    return httpx.Request("GET", TEST_URL)


@pytest.fixture
def mock_asleep() -> Generator[AsyncMock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", new=AsyncMock(return_value=None)) as mock:
        yield mock

