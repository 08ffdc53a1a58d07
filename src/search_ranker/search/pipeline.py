"""
End-to-end search: natural-language request -> queries -> results -> ranking.
"""

from __future__ import annotations

import logging
from typing import Protocol

from ..models import SearchQueries, SearchResponse, SearchResult
from .ranker import SemanticRanker

logger = logging.getLogger(__name__)


class QuerySource(Protocol):
    async def generate(self, natural_query: str) -> SearchQueries: ...


class ResultSource(Protocol):
    async def search(self, queries: list[str]) -> list[SearchResult]: ...


class SearchPipeline:
    """Generate queries, run them, and re-rank the combined results."""

    def __init__(
        self,
        query_generator: QuerySource,
        web_search: ResultSource,
        ranker: SemanticRanker,
    ) -> None:
        self.query_generator = query_generator
        self.web_search = web_search
        self.ranker = ranker

    async def run(
        self,
        query: str,
        *,
        limit: int = 10,
        use_cache: bool = True,
    ) -> SearchResponse:
        generated = await self.query_generator.generate(query)
        if generated.unfulfilled:
            logger.info("Query %r cannot be fulfilled by web search", query)
            return SearchResponse(query=query, unfulfilled=True)

        results = dedupe_results(await self.web_search.search(generated.queries))
        logger.info(
            "Ranking %d result(s) from %d quer(ies)",
            len(results),
            len(generated.queries),
        )
        ranked = await self.ranker.top_results(
            query, results, limit, use_cache=use_cache
        )
        return SearchResponse(query=query, queries=generated.queries, results=ranked)


def dedupe_results(results: list[SearchResult]) -> list[SearchResult]:
    """Drop results whose link was already seen; results without a link are kept."""
    seen: set[str] = set()
    unique: list[SearchResult] = []
    for result in results:
        if result.link is not None:
            if result.link in seen:
                continue
            seen.add(result.link)
        unique.append(result)
    return unique
