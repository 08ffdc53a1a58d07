"""Cache stores and the embedding cache."""

from .base import CacheStore
from .embeddings import EmbeddingCache
from .memory import InMemoryCacheStore
from .redis import RedisCacheStore

__all__ = [
    "CacheStore",
    "EmbeddingCache",
    "InMemoryCacheStore",
    "RedisCacheStore",
]
