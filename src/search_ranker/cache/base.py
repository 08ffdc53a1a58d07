"""
Cache store interface shared by the embedding and search-result caches.
"""

from __future__ import annotations

from typing import Protocol


class CacheStore(Protocol):
    """Protocol for a string key-value store with per-key expiry."""

    async def connect(self) -> None:
        """Open connections; must be called before get/set."""

    async def close(self) -> None:
        """Release connections."""

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None when absent or expired."""

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        """Store *value* under *key* for *ttl_seconds*."""
