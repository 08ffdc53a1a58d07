"""
Comparison text for search results.
"""

from __future__ import annotations

from ..models import SearchResult

MAX_DESCRIPTION_CHARS = 800
_DESCRIPTION_TAG = "og:description"


def extract_text(result: SearchResult) -> str:
    """Build the text embedded for a result from its title and description."""
    description = _rich_description(result)
    if description is None:
        description = result.snippet
    return f"Title: {result.title} Description: {description}"


def _rich_description(result: SearchResult) -> str | None:
    if result.pagemap is None or not result.pagemap.metatags:
        return None
    for tags in result.pagemap.metatags:
        value = tags.get(_DESCRIPTION_TAG)
        if isinstance(value, str) and value:
            return value[:MAX_DESCRIPTION_CHARS]
    return None
