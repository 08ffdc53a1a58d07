"""
Embedding provider for semantic re-ranking.

Wraps the Google GenAI embedding API for single-text and batch embedding
with configurable model, dimensions, and batch size.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Protocol

from google.genai import Client as GenAIClient

from .errors import InvalidInputError, ProviderError


_DEFAULT_MODEL = "gemini-embedding-001"
_DEFAULT_DIM = 768
_DEFAULT_BATCH_SIZE = 50

logger = logging.getLogger(__name__)


class EmbeddingBackend(Protocol):
    """Protocol for the embedding operations used by the ranker."""

    @property
    def model_id(self) -> str:
        """Identifier of the vector space produced by this backend."""

    async def embed(self, text: str) -> list[float]:
        """Embed one text."""

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed many texts, one vector per input, in order."""


class EmbeddingProvider:
    """Generate text embeddings via Google GenAI."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        dim: int | None = None,
        batch_size: int | None = None,
        client: Any | None = None,
    ) -> None:
        self.model = model or os.getenv(
            "SEARCH_RANKER_EMBEDDING_MODEL", _DEFAULT_MODEL
        )
        self.dim = dim or int(
            os.getenv("SEARCH_RANKER_EMBEDDING_DIM", str(_DEFAULT_DIM))
        )
        self.batch_size = batch_size or int(
            os.getenv("SEARCH_RANKER_EMBEDDING_BATCH_SIZE", str(_DEFAULT_BATCH_SIZE))
        )

        if client is not None:
            self._client = client
        else:
            resolved_key = api_key or os.getenv("GOOGLE_API_KEY")
            if resolved_key is None:
                raise ValueError(
                    "GOOGLE_API_KEY not found. "
                    "Provide api_key or set the environment variable."
                )
            self._client = GenAIClient(api_key=resolved_key)

    @property
    def model_id(self) -> str:
        """Identifier of the vector space, used to namespace cache keys."""
        return f"{self.model}:{self.dim}"

    async def embed(self, text: str) -> list[float]:
        """Embed a single query text for retrieval."""
        _require_text(text)
        vectors = await self._embed_content([text], task_type="RETRIEVAL_QUERY")
        return vectors[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed a list of result texts in batches.

        Returns a list of embedding vectors in the same order as *texts*.
        """
        for text in texts:
            _require_text(text)

        all_embeddings: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            batch = texts[start : start + self.batch_size]
            all_embeddings.extend(
                await self._embed_content(batch, task_type="RETRIEVAL_DOCUMENT")
            )
        return all_embeddings

    async def _embed_content(
        self, contents: list[str], *, task_type: str
    ) -> list[list[float]]:
        logger.debug("Embedding %d text(s) with %s", len(contents), self.model)
        try:
            result = await self._client.aio.models.embed_content(
                model=self.model,
                contents=contents,
                config={
                    "task_type": task_type,
                    "output_dimensionality": self.dim,
                },
            )
        except Exception as exc:
            logger.error("Embedding request to %s failed", self.model, exc_info=True)
            raise ProviderError(f"Embedding request failed: {exc}") from exc

        embeddings = result.embeddings or []
        if len(embeddings) != len(contents):
            raise ProviderError(
                f"Expected {len(contents)} embedding(s), got {len(embeddings)}."
            )

        vectors: list[list[float]] = []
        for emb in embeddings:
            if not emb.values:
                raise ProviderError("Missing embedding values in provider response.")
            vectors.append([float(value) for value in emb.values])
        return vectors


def _require_text(text: str) -> None:
    if not isinstance(text, str) or not text.strip():
        raise InvalidInputError("Cannot embed empty text.")
