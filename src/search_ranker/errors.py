"""
Exception hierarchy shared by the embedding, caching and ranking layers.
"""

from __future__ import annotations


class SearchRankerError(Exception):
    """Base class for all search-ranker errors."""


class InvalidInputError(SearchRankerError, ValueError):
    """Blank or otherwise unusable text was submitted."""


class DimensionMismatchError(SearchRankerError, ValueError):
    """Two vectors of different length were compared."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(
            f"Vectors must have the same length (got {left} and {right})."
        )
        self.left = left
        self.right = right


class ProviderError(SearchRankerError):
    """The embedding provider failed or returned an unusable response."""


class CacheError(SearchRankerError):
    """The cache store is unavailable or rejected an operation."""


class QueryGenerationError(SearchRankerError):
    """The language model reply could not be turned into search queries."""


class RankingError(SearchRankerError):
    """Ranking failed; ``cause`` holds the underlying exception."""

    def __init__(self, message: str, *, cause: BaseException) -> None:
        super().__init__(f"{message}: {cause}")
        self.cause = cause
