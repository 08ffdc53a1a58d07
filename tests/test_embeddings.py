"""Tests for the embedding provider."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

import pytest

from search_ranker.embeddings import EmbeddingProvider
from search_ranker.errors import InvalidInputError, ProviderError


# ---------------------------------------------------------------------------
# Mock helpers
# ---------------------------------------------------------------------------


@dataclass
class _FakeEmbedding:
    values: list[float] | None


@dataclass
class _FakeEmbedResult:
    embeddings: list[_FakeEmbedding] | None


class _FakeModels:
    """Records calls and returns deterministic embeddings."""

    def __init__(self, *, drop: int = 0, error: Exception | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self.drop = drop
        self.error = error

    async def embed_content(
        self, *, model: str, contents: list[str], config: dict
    ) -> _FakeEmbedResult:
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        dim = config.get("output_dimensionality", 768)
        count = max(len(contents) - self.drop, 0)
        return _FakeEmbedResult(
            embeddings=[_FakeEmbedding(values=[float(i + 1)] * dim) for i in range(count)]
        )


class _FakeAio:
    def __init__(self, models: _FakeModels) -> None:
        self.models = models


class _FakeClient:
    def __init__(self, **kwargs: Any) -> None:
        self.models = _FakeModels(**kwargs)
        self.aio = _FakeAio(self.models)


# ---------------------------------------------------------------------------
# Unit tests (mock-based, no API key needed)
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_embed_batch_returns_one_vector_per_text() -> None:
    client = _FakeClient()
    provider = EmbeddingProvider(client=client, dim=4, batch_size=50)

    embeddings = await provider.embed_batch(["hello", "world"])

    assert len(embeddings) == 2
    assert len(embeddings[0]) == 4
    assert embeddings[0] == [1.0] * 4
    assert embeddings[1] == [2.0] * 4


@pytest.mark.asyncio
async def test_embed_batch_uses_document_task_type() -> None:
    client = _FakeClient()
    provider = EmbeddingProvider(client=client, dim=4)

    await provider.embed_batch(["test"])

    call = client.models.calls[0]
    assert call["config"]["task_type"] == "RETRIEVAL_DOCUMENT"


@pytest.mark.asyncio
async def test_embed_uses_query_task_type() -> None:
    client = _FakeClient()
    provider = EmbeddingProvider(client=client, dim=4)

    result = await provider.embed("search query")

    assert len(result) == 4
    call = client.models.calls[0]
    assert call["contents"] == ["search query"]
    assert call["config"]["task_type"] == "RETRIEVAL_QUERY"


@pytest.mark.asyncio
async def test_embed_batch_splits_large_requests() -> None:
    client = _FakeClient()
    provider = EmbeddingProvider(client=client, dim=4, batch_size=3)

    texts = [f"text_{i}" for i in range(7)]
    embeddings = await provider.embed_batch(texts)

    assert len(embeddings) == 7
    # 7 texts with batch_size=3 → 3 API calls (3+3+1)
    assert [len(call["contents"]) for call in client.models.calls] == [3, 3, 1]


@pytest.mark.asyncio
async def test_embed_batch_of_nothing_makes_no_call() -> None:
    client = _FakeClient()
    provider = EmbeddingProvider(client=client, dim=4)

    assert await provider.embed_batch([]) == []
    assert client.models.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
async def test_blank_text_is_rejected_before_any_call(text: str) -> None:
    client = _FakeClient()
    provider = EmbeddingProvider(client=client, dim=4)

    with pytest.raises(InvalidInputError):
        await provider.embed(text)
    with pytest.raises(InvalidInputError):
        await provider.embed_batch(["fine", text])
    assert client.models.calls == []


@pytest.mark.asyncio
async def test_upstream_error_becomes_provider_error() -> None:
    upstream = RuntimeError("quota exceeded")
    client = _FakeClient(error=upstream)
    provider = EmbeddingProvider(client=client, dim=4)

    with pytest.raises(ProviderError) as excinfo:
        await provider.embed("query")
    assert excinfo.value.__cause__ is upstream


@pytest.mark.asyncio
async def test_short_batch_response_is_a_provider_error() -> None:
    client = _FakeClient(drop=1)
    provider = EmbeddingProvider(client=client, dim=4)

    with pytest.raises(ProviderError, match="Expected 3"):
        await provider.embed_batch(["a", "b", "c"])


@pytest.mark.asyncio
async def test_missing_values_is_a_provider_error() -> None:
    client = _FakeClient()

    async def _empty(**kwargs: Any) -> _FakeEmbedResult:
        return _FakeEmbedResult(embeddings=[_FakeEmbedding(values=None)])

    client.aio.models.embed_content = _empty  # type: ignore[method-assign]
    provider = EmbeddingProvider(client=client, dim=4)

    with pytest.raises(ProviderError):
        await provider.embed("query")


@pytest.mark.asyncio
async def test_no_embeddings_is_a_provider_error() -> None:
    client = _FakeClient()

    async def _none(**kwargs: Any) -> _FakeEmbedResult:
        return _FakeEmbedResult(embeddings=None)

    client.aio.models.embed_content = _none  # type: ignore[method-assign]
    provider = EmbeddingProvider(client=client, dim=4)

    with pytest.raises(ProviderError):
        await provider.embed("query")


def test_model_id_includes_dimensions() -> None:
    provider = EmbeddingProvider(client=_FakeClient(), model="m-1", dim=256)

    assert provider.model_id == "m-1:256"


@pytest.mark.asyncio
async def test_env_overrides(monkeypatch) -> None:
    client = _FakeClient()
    monkeypatch.setenv("SEARCH_RANKER_EMBEDDING_MODEL", "custom-model-001")
    monkeypatch.setenv("SEARCH_RANKER_EMBEDDING_DIM", "256")
    monkeypatch.setenv("SEARCH_RANKER_EMBEDDING_BATCH_SIZE", "10")

    provider = EmbeddingProvider(client=client)

    assert provider.model == "custom-model-001"
    assert provider.dim == 256
    assert provider.batch_size == 10

    await provider.embed_batch(["test"])
    call = client.models.calls[0]
    assert call["model"] == "custom-model-001"
    assert call["config"]["output_dimensionality"] == 256


def test_missing_api_key_raises(monkeypatch) -> None:
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(ValueError, match="GOOGLE_API_KEY"):
        EmbeddingProvider(api_key=None, client=None)


# ---------------------------------------------------------------------------
# Real API integration test (skipped unless GOOGLE_API_KEY is set)
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.skipif(
    not os.getenv("GOOGLE_API_KEY"),
    reason="GOOGLE_API_KEY not set, skipping real embedding test",
)
async def test_real_embedding_api() -> None:
    provider = EmbeddingProvider(dim=128)

    texts = ["Best hiking boots of the year.", "Discount footwear deals."]
    embeddings = await provider.embed_batch(texts)

    assert len(embeddings) == 2
    assert len(embeddings[0]) == 128
    assert all(isinstance(v, float) for v in embeddings[0])

    query_emb = await provider.embed("hiking boots")
    assert len(query_emb) == 128
