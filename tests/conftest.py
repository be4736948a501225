from __future__ import annotations

import pytest


@pytest.fixture
def anyio_backend() -> str:
    # Services rely on asyncio.gather / asyncio.to_thread.
    return "asyncio"
