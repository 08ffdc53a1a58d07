"""
Semantic re-ranking of web search results.

Embeds the query and every candidate, scores each candidate by cosine
similarity to the query, and returns the candidates best-first. Embeddings
are served from the cache where possible; all cache misses for a request
are fetched with a single batch call.
"""

from __future__ import annotations

import logging
from typing import cast

from ..cache import EmbeddingCache
from ..embeddings import EmbeddingBackend
from ..errors import ProviderError, RankingError
from ..models import RankedResult, SearchResult
from .extract import extract_text
from .similarity import cosine_similarity

logger = logging.getLogger(__name__)


class SemanticRanker:
    """Rank search results by embedding similarity to a query."""

    def __init__(
        self,
        embedding_provider: EmbeddingBackend,
        cache: EmbeddingCache | None = None,
    ) -> None:
        self.embedding_provider = embedding_provider
        self.cache = cache

    @property
    def query_namespace(self) -> str:
        """Cache namespace for query vectors (RETRIEVAL_QUERY space)."""
        return f"{self.embedding_provider.model_id}:query"

    @property
    def document_namespace(self) -> str:
        """Cache namespace for result vectors (RETRIEVAL_DOCUMENT space)."""
        return f"{self.embedding_provider.model_id}:document"

    async def rank(
        self,
        query: str,
        results: list[SearchResult],
        *,
        use_cache: bool = True,
    ) -> list[RankedResult]:
        """Return *results* as ranked results, most similar first.

        Raises RankingError wrapping the underlying failure; a partial
        ranking is never returned.
        """
        if not results:
            return []

        caching = use_cache and self.cache is not None
        try:
            query_embedding = await self._embed_query(query, use_cache=caching)
            texts = [extract_text(result) for result in results]
            embeddings = await self.resolve_embeddings(texts, use_cache=caching)
            scored = [
                RankedResult.from_result(
                    result, cosine_similarity(query_embedding, embedding)
                )
                for result, embedding in zip(results, embeddings)
            ]
        except Exception as exc:
            logger.error("Ranking %d result(s) failed: %s", len(results), exc)
            raise RankingError("Failed to rank search results", cause=exc) from exc

        ordered = sorted(
            enumerate(scored), key=lambda item: (-item[1].similarity, item[0])
        )
        return [ranked for _, ranked in ordered]

    async def quick_rank(
        self, query: str, results: list[SearchResult]
    ) -> list[RankedResult]:
        """Rank without touching the cache."""
        return await self.rank(query, results, use_cache=False)

    async def top_results(
        self,
        query: str,
        results: list[SearchResult],
        n: int = 10,
        *,
        use_cache: bool = True,
    ) -> list[RankedResult]:
        """Return the *n* best-ranked results."""
        ranked = await self.rank(query, results, use_cache=use_cache)
        return ranked[: max(n, 0)]

    async def resolve_embeddings(
        self, texts: list[str], *, use_cache: bool = True
    ) -> list[list[float]]:
        """Return one embedding per text, in order.

        With caching, only the texts missing from the cache are sent to the
        provider, in one batch; fresh vectors are written back and spliced
        into their original positions.
        """
        if not texts:
            return []

        model = self.document_namespace
        if not use_cache or self.cache is None:
            return await self._embed_batch(texts)

        cached = await self.cache.get_many(model, texts)
        miss_indices = [idx for idx, vector in enumerate(cached) if vector is None]
        logger.debug(
            "Embedding cache: %d hit(s), %d miss(es)",
            len(texts) - len(miss_indices),
            len(miss_indices),
        )
        if not miss_indices:
            return cast(list[list[float]], cached)

        missed_texts = [texts[idx] for idx in miss_indices]
        fresh = await self._embed_batch(missed_texts)
        await self.cache.set_many(model, list(zip(missed_texts, fresh)))

        embeddings = list(cached)
        for idx, vector in zip(miss_indices, fresh):
            embeddings[idx] = vector
        return cast(list[list[float]], embeddings)

    async def _embed_query(self, query: str, *, use_cache: bool) -> list[float]:
        model = self.query_namespace
        if use_cache and self.cache is not None:
            cached = await self.cache.get(model, query)
            if cached is not None:
                return cached

        embedding = await self.embedding_provider.embed(query)
        if use_cache and self.cache is not None:
            await self.cache.set(model, query, embedding)
        return embedding

    async def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        embeddings = await self.embedding_provider.embed_batch(texts)
        if len(embeddings) != len(texts):
            # Backends other than EmbeddingProvider may not enforce this.
            raise ProviderError(
                f"Expected {len(texts)} embedding(s), got {len(embeddings)}."
            )
        return embeddings
