import json
import logging
import os
import re
from typing import Any

from google.genai import Client as GenAIClient
from pydantic import ValidationError

from ..errors import InvalidInputError, QueryGenerationError
from ..models import MAX_SEARCH_QUERIES, SearchQueries

logger = logging.getLogger(__name__)

_DEFAULT_MODEL = "gemini-2.5-flash"
_UNFULFILLED_REPLIES = {"Unfulfilled", "UNDEFINED"}
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

SYSTEM_PROMPT = f"""
You turn a user's natural-language request into literal web search queries.

Rules:
- Produce between 1 and {MAX_SEARCH_QUERIES} queries, each one something a person would type into a search engine.
- Cover distinct aspects of the request instead of rephrasing the same query.
- Keep names, products, places and dates from the request verbatim.
- If the request cannot be answered with a web search (greetings, requests for actions, nonsense), set `unfulfilled` to true and return no queries.

Reply with JSON only, in the shape {{"queries": ["..."], "unfulfilled": false}}.
"""


class QueryGenerator:
    """Decompose a natural-language request into search-engine queries."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str | None = None,
        client: Any | None = None,
    ):
        self.model = model or os.getenv("SEARCH_RANKER_QUERY_MODEL", _DEFAULT_MODEL)
        if client is not None:
            self._client = client
            return
        if api_key is None:
            api_key = os.getenv("GOOGLE_API_KEY")
        if api_key is None:
            raise ValueError(
                "GOOGLE_API_KEY not found within the current environment: please export it or provide it to the class constructor."
            )
        self._client = GenAIClient(api_key=api_key)

    async def generate(self, natural_query: str) -> SearchQueries:
        if not natural_query or not natural_query.strip():
            raise InvalidInputError("Cannot generate search queries for empty text.")

        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=natural_query.strip(),
                config={
                    "system_instruction": SYSTEM_PROMPT,
                    "temperature": 0.2,
                    "response_mime_type": "application/json",
                    "response_json_schema": SearchQueries.model_json_schema(),
                },
            )
        except Exception as exc:
            logger.error("Query generation request failed", exc_info=True)
            raise QueryGenerationError(
                f"Failed to generate search queries: {exc}"
            ) from exc

        return parse_queries(response.text or "")


def parse_queries(text: str) -> SearchQueries:
    """Parse a model reply into SearchQueries."""
    text = text.strip()
    if text in _UNFULFILLED_REPLIES:
        return SearchQueries(unfulfilled=True)

    match = _JSON_OBJECT.search(text)
    if match is None:
        raise QueryGenerationError(
            "Failed to generate search queries: no JSON object in model reply"
        )
    try:
        parsed = SearchQueries.model_validate(json.loads(match.group(0)))
    except (ValueError, ValidationError) as exc:
        raise QueryGenerationError(
            f"Failed to generate search queries: invalid reply structure ({exc})"
        ) from exc

    if parsed.unfulfilled:
        return SearchQueries(unfulfilled=True)
    queries = [query.strip() for query in parsed.queries if query.strip()]
    if len(queries) > MAX_SEARCH_QUERIES:
        raise QueryGenerationError(
            f"Expected at most {MAX_SEARCH_QUERIES} queries, got {len(queries)}"
        )
    if not queries:
        return SearchQueries(unfulfilled=True)
    return SearchQueries(queries=queries)
