"""
Google Custom Search client with a per-query result cache.

Failures are contained per query: a cache problem is logged and bypassed,
and a failed search contributes no results instead of failing the batch.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
from typing import Any

import httpx
from pydantic import ValidationError

from ..cache import CacheStore
from ..config import DEFAULT_SEARCH_TTL_SECONDS
from ..errors import CacheError
from ..models import SearchResult

logger = logging.getLogger(__name__)

SEARCH_URL = "https://customsearch.googleapis.com/customsearch/v1"
_WHITESPACE = re.compile(r"\s+")


def make_search_cache_key(query: str) -> str:
    return f"search:{_WHITESPACE.sub('-', query.lower())}"


class WebSearchClient:
    """Run literal queries against Google Custom Search."""

    def __init__(
        self,
        *,
        cache: CacheStore | None = None,
        api_key: str | None = None,
        engine_id: str | None = None,
        ttl_seconds: int = DEFAULT_SEARCH_TTL_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key or os.getenv("SEARCH_API_KEY")
        if self.api_key is None:
            raise ValueError(
                "SEARCH_API_KEY not found. "
                "Provide api_key or set the environment variable."
            )
        self.engine_id = engine_id or os.getenv("SEARCH_ENGINE_ID")
        if not self.engine_id:
            raise ValueError(
                "SEARCH_ENGINE_ID not found. "
                "Provide engine_id or set the environment variable."
            )
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=10.0)

    async def close(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def search(self, queries: list[str]) -> list[SearchResult]:
        """Search every query concurrently and flatten results in query order."""
        per_query = await asyncio.gather(*(self.search_one(q) for q in queries))
        return [result for results in per_query for result in results]

    async def search_one(self, query: str) -> list[SearchResult]:
        cache_key = make_search_cache_key(query)
        cached = await self._read_cache(cache_key)
        if cached is not None:
            return cached

        params = {"key": self.api_key, "cx": self.engine_id, "q": query}
        try:
            response = await self._http.get(SEARCH_URL, params=params)
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError("Search response must be a JSON object")
            items: list[dict[str, Any]] = payload.get("items") or []
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error searching for %r: %s", query, exc)
            return []

        results = _parse_items(items)
        await self._write_cache(cache_key, results)
        return results

    async def _read_cache(self, key: str) -> list[SearchResult] | None:
        if self.cache is None:
            return None
        try:
            raw = await self.cache.get(key)
        except (CacheError, OSError) as exc:
            logger.warning("Error reading search cache %s: %s", key, exc)
            return None
        if raw is None:
            return None
        try:
            return _parse_items(json.loads(raw))
        except (TypeError, ValueError):
            logger.warning("Discarding malformed search cache entry %s", key)
            return None

    async def _write_cache(self, key: str, results: list[SearchResult]) -> None:
        if self.cache is None:
            return
        payload = json.dumps([result.model_dump(exclude_none=True) for result in results])
        try:
            await self.cache.set_with_expiry(key, self.ttl_seconds, payload)
        except (CacheError, OSError) as exc:
            logger.warning("Error caching search results %s: %s", key, exc)
            return
        logger.debug("Cached %d result(s) under %s", len(results), key)


def _parse_items(items: Any) -> list[SearchResult]:
    if not isinstance(items, list):
        raise ValueError("Search items must be a list")
    results: list[SearchResult] = []
    for item in items:
        try:
            results.append(SearchResult.model_validate(item))
        except ValidationError:
            logger.debug("Skipping malformed search item: %r", item)
    return results
