"""Shared test fixtures."""

from collections.abc import Iterable

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from yzroll.infra.cache import roll_cache
from yzroll.main import app


@pytest_asyncio.fixture
async def client():
    roll_cache.clear()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    roll_cache.clear()


def scripted(values: Iterable[int]):
    """A die roller that returns ``values`` in order, whatever the die size."""
    it = iter(values)

    def _roll(faces: int) -> int:
        value = next(it)
        assert 1 <= value <= faces, f"scripted {value} is not a face of a d{faces}"
        return value

    return _roll
