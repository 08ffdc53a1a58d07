from pydantic import BaseModel, ConfigDict, Field
from typing import Any

MAX_SEARCH_QUERIES = 4


class Pagemap(BaseModel):
    """Structured page metadata attached to a web search result"""

    model_config = ConfigDict(extra="allow", frozen=True)

    metatags: list[dict[str, Any]] | None = Field(
        default=None, description="Meta tag dictionaries scraped from the page"
    )


class SearchResult(BaseModel):
    """A single web search result as returned by the search provider"""

    model_config = ConfigDict(extra="allow", frozen=True)

    title: str = Field(description="Title of the result page")
    snippet: str = Field(default="", description="Short snippet shown by the engine")
    link: str | None = Field(default=None, description="URL of the result page")
    pagemap: Pagemap | None = Field(
        default=None, description="Optional structured metadata for the page"
    )


class RankedResult(SearchResult):
    """Search result scored against the original query"""

    similarity: float = Field(description="Cosine similarity to the query")

    @classmethod
    def from_result(cls, result: SearchResult, similarity: float) -> "RankedResult":
        # dict() is shallow: nested pagemap objects are shared, not copied.
        return cls.model_validate({**dict(result), "similarity": similarity})


class SearchQueries(BaseModel):
    """Literal search-engine queries derived from a natural-language request"""

    queries: list[str] = Field(
        default_factory=list,
        description=f"Up to {MAX_SEARCH_QUERIES} literal search-engine queries",
    )
    unfulfilled: bool = Field(
        default=False,
        description="True when the request cannot be answered with a web search",
    )


class SearchResponse(BaseModel):
    """Outcome of a full query -> search -> rank run"""

    query: str
    queries: list[str] = Field(default_factory=list)
    unfulfilled: bool = False
    results: list[RankedResult] = Field(default_factory=list)
