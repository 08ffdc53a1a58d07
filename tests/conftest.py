from __future__ import annotations

from typing import Callable

import pytest

from search_ranker.cache import InMemoryCacheStore
from search_ranker.errors import CacheError
from search_ranker.models import SearchResult


class FakeEmbeddingBackend:
    """Serves fixed vectors per exact text and records every call."""

    model_id = "fake-embedding:2"

    def __init__(self, vectors: dict[str, list[float]]) -> None:
        self.vectors = vectors
        self.embed_calls: list[str] = []
        self.batch_calls: list[list[str]] = []

    async def embed(self, text: str) -> list[float]:
        self.embed_calls.append(text)
        return list(self.vectors[text])

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        return [list(self.vectors[text]) for text in texts]

    @property
    def call_count(self) -> int:
        return len(self.embed_calls) + len(self.batch_calls)


class RecordingCacheStore(InMemoryCacheStore):
    """In-memory store that records keys read and written."""

    def __init__(self) -> None:
        super().__init__()
        self.gets: list[str] = []
        self.sets: list[tuple[str, int]] = []

    async def get(self, key: str) -> str | None:
        self.gets.append(key)
        return await super().get(key)

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        self.sets.append((key, ttl_seconds))
        await super().set_with_expiry(key, ttl_seconds, value)


class FailingCacheStore:
    """Store whose every operation fails as if Redis were down."""

    def __init__(self) -> None:
        self.attempts = 0

    async def connect(self) -> None:
        return None

    async def close(self) -> None:
        return None

    async def get(self, key: str) -> str | None:
        self.attempts += 1
        raise CacheError("connection refused")

    async def set_with_expiry(self, key: str, ttl_seconds: int, value: str) -> None:
        self.attempts += 1
        raise ConnectionError("connection refused")


HIKING_QUERY = "best hiking boots"
HIKING_TEXT_BOOTS = "Title: Top Boots 2024 Description: Our picks for hiking boots"
HIKING_TEXT_SHOES = "Title: Cheap Shoes Description: Discount footwear deals"


@pytest.fixture()
def make_backend() -> Callable[[dict[str, list[float]]], FakeEmbeddingBackend]:
    return FakeEmbeddingBackend


@pytest.fixture()
def recording_store() -> RecordingCacheStore:
    return RecordingCacheStore()


@pytest.fixture()
def failing_store() -> FailingCacheStore:
    return FailingCacheStore()


@pytest.fixture()
def hiking_results() -> list[SearchResult]:
    return [
        SearchResult(title="Top Boots 2024", snippet="Our picks for hiking boots"),
        SearchResult(title="Cheap Shoes", snippet="Discount footwear deals"),
    ]


@pytest.fixture()
def hiking_backend() -> FakeEmbeddingBackend:
    return FakeEmbeddingBackend(
        {
            HIKING_QUERY: [1.0, 0.0],
            HIKING_TEXT_BOOTS: [0.9, 0.1],
            HIKING_TEXT_SHOES: [0.0, 1.0],
        }
    )
