"""Ranking, query generation and web search."""

from .extract import MAX_DESCRIPTION_CHARS, extract_text
from .pipeline import SearchPipeline, dedupe_results
from .queries import QueryGenerator, parse_queries
from .ranker import SemanticRanker
from .similarity import cosine_similarity
from .web import WebSearchClient, make_search_cache_key

__all__ = [
    "MAX_DESCRIPTION_CHARS",
    "extract_text",
    "SearchPipeline",
    "dedupe_results",
    "QueryGenerator",
    "parse_queries",
    "SemanticRanker",
    "cosine_similarity",
    "WebSearchClient",
    "make_search_cache_key",
]
