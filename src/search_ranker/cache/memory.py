"""
In-process cache store with per-key expiry.
"""

from __future__ import annotations

import time
from typing import Callable


class InMemoryCacheStore:
    """Dictionary-backed cache store for single-process use and tests."""

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    async def connect(self) -> None:
        return None

    async def close(self) -> None:
        self._entries.clear()

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)

    def __len__(self) -> int:
        return len(self._entries)
