"""In-memory store for live rolls, so they can be pushed or modified later."""

from __future__ import annotations

import time
import uuid

from yzroll.domain.roll import YearZeroRoll
from yzroll.infra.config import settings


class RollCache:
    """TTL-based in-memory roll store backed by a dict."""

    def __init__(self, default_ttl: int = 3600) -> None:
        self._store: dict[str, tuple[YearZeroRoll, float]] = {}
        self._default_ttl = default_ttl

    def __len__(self) -> int:
        self._purge()
        return len(self._store)

    def add(self, roll: YearZeroRoll, ttl: int | None = None) -> str:
        roll_id = uuid.uuid4().hex
        self.set(roll_id, roll, ttl)
        return roll_id

    def get(self, roll_id: str) -> YearZeroRoll | None:
        entry = self._store.get(roll_id)
        if entry is None:
            return None
        roll, expires_at = entry
        if time.time() > expires_at:
            del self._store[roll_id]
            return None
        return roll

    def set(self, roll_id: str, roll: YearZeroRoll, ttl: int | None = None) -> None:
        self._purge()
        ttl = ttl if ttl is not None else self._default_ttl
        self._store[roll_id] = (roll, time.time() + ttl)

    def delete(self, roll_id: str) -> bool:
        return self._store.pop(roll_id, None) is not None

    def clear(self) -> None:
        self._store.clear()

    def _purge(self) -> None:
        now = time.time()
        for roll_id in [k for k, (_, exp) in self._store.items() if now > exp]:
            del self._store[roll_id]


roll_cache = RollCache(default_ttl=settings.roll_cache_ttl)
