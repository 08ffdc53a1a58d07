"""
Construction and lifecycle of the external-service clients.

Clients are built explicitly and handed to the components that use them;
nothing here is a module-level singleton.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .cache import CacheStore, EmbeddingCache, InMemoryCacheStore, RedisCacheStore
from .config import resolve_embedding_ttl, resolve_redis_url, resolve_search_ttl
from .embeddings import EmbeddingProvider
from .errors import CacheError
from .search import QueryGenerator, SearchPipeline, SemanticRanker, WebSearchClient

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Wired components sharing one cache store."""

    cache_store: CacheStore
    ranker: SemanticRanker
    pipeline: SearchPipeline | None = None
    web_search: WebSearchClient | None = None

    async def connect(self) -> None:
        """Connect the cache store; an unreachable cache is logged, not fatal."""
        try:
            await self.cache_store.connect()
        except CacheError as exc:
            logger.warning("Cache unavailable, continuing without it: %s", exc)

    async def close(self) -> None:
        try:
            if self.web_search is not None:
                await self.web_search.close()
        finally:
            await self.cache_store.close()


def build_cache_store(redis_url: str | None = None) -> CacheStore:
    """Return a Redis store when a URL is configured, else an in-memory one."""
    url = resolve_redis_url(redis_url)
    if url is None:
        logger.info("No Redis URL configured; using in-memory cache")
        return InMemoryCacheStore()
    return RedisCacheStore(url)


def build_services(
    *,
    redis_url: str | None = None,
    with_search: bool = True,
) -> Services:
    """Build services from environment configuration.

    With ``with_search`` the query generator and web search client are built
    too, which requires SEARCH_API_KEY in addition to GOOGLE_API_KEY.
    """
    store = build_cache_store(redis_url)
    ranker = SemanticRanker(
        EmbeddingProvider(),
        cache=EmbeddingCache(store, ttl_seconds=resolve_embedding_ttl()),
    )
    if not with_search:
        return Services(cache_store=store, ranker=ranker)

    web_search = WebSearchClient(cache=store, ttl_seconds=resolve_search_ttl())
    pipeline = SearchPipeline(QueryGenerator(), web_search, ranker)
    return Services(
        cache_store=store,
        ranker=ranker,
        pipeline=pipeline,
        web_search=web_search,
    )
