"""
Redis-backed cache store.
"""

from __future__ import annotations

import logging
from typing import Any

import redis.asyncio as redis_async
from redis.exceptions import RedisError

from ..errors import CacheError

logger = logging.getLogger(__name__)


class RedisCacheStore:
    """Cache store on top of ``redis.asyncio`` with explicit connect/close."""

    def __init__(
        self,
        url: str,
        *,
        socket_connect_timeout: float = 5.0,
        client: Any | None = None,
    ) -> None:
        self.url = url
        self.socket_connect_timeout = socket_connect_timeout
        self._client = client

    @property
    def connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        if self._client is not None:
            return
        client = redis_async.from_url(
            self.url,
            decode_responses=True,
            socket_connect_timeout=self.socket_connect_timeout,
        )
        try:
            await client.ping()
        except RedisError as exc:
            await client.aclose()
            raise CacheError(f"Could not connect to Redis: {exc}") from exc
        self._client = client
        logger.info("Redis cache connected")

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        logger.info("Redis cache closed")

    async def get(self, key: str) -> str | None:
        client = self._require_client()
        try:
            return await client.get(key)
        except RedisError as exc:
            raise CacheError(f"Redis GET failed for {key!r}: {exc}") from exc

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        client = self._require_client()
        try:
            await client.setex(key, ttl_seconds, value)
        except RedisError as exc:
            raise CacheError(f"Redis SETEX failed for {key!r}: {exc}") from exc

    def _require_client(self) -> Any:
        if self._client is None:
            raise CacheError("Redis not connected. Call connect() first.")
        return self._client
