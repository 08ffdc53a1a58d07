"""
Configuration helpers for caches and external services.

Every setting follows the same precedence:
1) explicit override
2) environment variable
3) default
"""

from __future__ import annotations

import os


ENV_REDIS_URL = "SEARCH_RANKER_REDIS_URL"
ENV_REDIS_URL_FALLBACK = "REDIS_URL"
ENV_EMBEDDING_TTL = "SEARCH_RANKER_EMBEDDING_TTL"
ENV_SEARCH_TTL = "SEARCH_RANKER_SEARCH_TTL"

# Embeddings for a given model+text never change, so they can live for days.
DEFAULT_EMBEDDING_TTL_SECONDS = 7 * 24 * 60 * 60
DEFAULT_SEARCH_TTL_SECONDS = 2 * 60 * 60


def resolve_redis_url(override_url: str | None = None) -> str | None:
    """Return the Redis URL to use, or ``None`` for the in-memory cache."""
    return (
        override_url
        or os.getenv(ENV_REDIS_URL)
        or os.getenv(ENV_REDIS_URL_FALLBACK)
        or None
    )


def _resolve_seconds(override: int | None, env_name: str, default: int) -> int:
    if override is not None:
        value = override
    else:
        raw = os.getenv(env_name)
        if raw is None or raw.strip() == "":
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            raise ValueError(f"{env_name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{env_name} must be > 0")
    return value


def resolve_embedding_ttl(override: int | None = None) -> int:
    """Resolve the embedding cache TTL in seconds."""
    return _resolve_seconds(override, ENV_EMBEDDING_TTL, DEFAULT_EMBEDDING_TTL_SECONDS)


def resolve_search_ttl(override: int | None = None) -> int:
    """Resolve the web search result cache TTL in seconds."""
    return _resolve_seconds(override, ENV_SEARCH_TTL, DEFAULT_SEARCH_TTL_SECONDS)
