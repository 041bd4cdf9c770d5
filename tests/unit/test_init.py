from __future__ import annotations

import aretryafter


def test_version() -> None:
    assert isinstance(aretryafter.__version__, str)


def test_public_api() -> None:
    for name in aretryafter.__all__:
        assert hasattr(aretryafter, name)
