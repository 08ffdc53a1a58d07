"""
Content-addressed cache for embedding vectors.

Keys combine the model identifier with a SHA-256 digest of the stripped
text. Store failures never escape: reads degrade to misses and writes are
skipped, both with a warning.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging

from ..config import DEFAULT_EMBEDDING_TTL_SECONDS
from ..errors import CacheError
from .base import CacheStore

logger = logging.getLogger(__name__)

_KEY_PREFIX = "embedding"
_DIGEST_LENGTH = 32


class EmbeddingCache:
    """Get/set embedding vectors by (model, text) on top of a cache store."""

    def __init__(
        self,
        store: CacheStore,
        *,
        ttl_seconds: int = DEFAULT_EMBEDDING_TTL_SECONDS,
    ) -> None:
        self.store = store
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def make_key(model: str, text: str) -> str:
        digest = hashlib.sha256(text.strip().encode("utf-8")).hexdigest()
        return f"{_KEY_PREFIX}:{model}:{digest[:_DIGEST_LENGTH]}"

    async def get(self, model: str, text: str) -> list[float] | None:
        key = self.make_key(model, text)
        try:
            raw = await self.store.get(key)
        except (CacheError, OSError) as exc:
            logger.warning("Embedding cache read failed for %s: %s", key, exc)
            return None
        if raw is None:
            return None
        return _decode_vector(key, raw)

    async def set(
        self,
        model: str,
        text: str,
        vector: list[float],
        ttl: int | None = None,
    ) -> None:
        key = self.make_key(model, text)
        try:
            await self.store.set_with_expiry(
                key, ttl or self.ttl_seconds, json.dumps(vector)
            )
        except (CacheError, OSError) as exc:
            logger.warning("Embedding cache write failed for %s: %s", key, exc)
            return
        logger.debug("Cached embedding %s", key)

    async def get_many(self, model: str, texts: list[str]) -> list[list[float] | None]:
        return list(await asyncio.gather(*(self.get(model, text) for text in texts)))

    async def set_many(
        self,
        model: str,
        items: list[tuple[str, list[float]]],
        ttl: int | None = None,
    ) -> None:
        await asyncio.gather(
            *(self.set(model, text, vector, ttl) for text, vector in items)
        )


def _decode_vector(key: str, raw: str) -> list[float] | None:
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding malformed cached embedding %s", key)
        return None
    if not isinstance(payload, list) or not payload:
        logger.warning("Discarding malformed cached embedding %s", key)
        return None
    try:
        return [float(value) for value in payload]
    except (TypeError, ValueError):
        logger.warning("Discarding malformed cached embedding %s", key)
        return None
