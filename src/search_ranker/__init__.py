"""
search-ranker - semantic re-ranking of web search results.

This package turns a natural-language request into literal web search
queries with Google Gemini, runs them through Google Custom Search, and
re-ranks the combined results by embedding similarity to the request.
Embeddings and search results are cached in Redis (or in memory).

Example usage:
    >>> from search_ranker import EmbeddingProvider, EmbeddingCache, SemanticRanker
    >>> from search_ranker import InMemoryCacheStore
    >>> ranker = SemanticRanker(
    ...     EmbeddingProvider(), cache=EmbeddingCache(InMemoryCacheStore())
    ... )
    >>> ranked = await ranker.rank("best hiking boots", results)
"""

from .cache import CacheStore, EmbeddingCache, InMemoryCacheStore, RedisCacheStore
from .embeddings import EmbeddingBackend, EmbeddingProvider
from .errors import (
    CacheError,
    DimensionMismatchError,
    InvalidInputError,
    ProviderError,
    QueryGenerationError,
    RankingError,
    SearchRankerError,
)
from .models import (
    Pagemap,
    RankedResult,
    SearchQueries,
    SearchResponse,
    SearchResult,
)
from .search import (
    QueryGenerator,
    SearchPipeline,
    SemanticRanker,
    WebSearchClient,
    cosine_similarity,
    extract_text,
)

__all__ = [
    # Cache
    "CacheStore",
    "EmbeddingCache",
    "InMemoryCacheStore",
    "RedisCacheStore",
    # Embeddings
    "EmbeddingBackend",
    "EmbeddingProvider",
    # Errors
    "CacheError",
    "DimensionMismatchError",
    "InvalidInputError",
    "ProviderError",
    "QueryGenerationError",
    "RankingError",
    "SearchRankerError",
    # Models
    "Pagemap",
    "RankedResult",
    "SearchQueries",
    "SearchResponse",
    "SearchResult",
    # Search
    "QueryGenerator",
    "SearchPipeline",
    "SemanticRanker",
    "WebSearchClient",
    "cosine_similarity",
    "extract_text",
]
