"""
FastAPI server for search ranking.

Exposes the re-ranking engine directly (``/api/rank``) and the full
natural-language search pipeline (``/api/search``).
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .errors import InvalidInputError, QueryGenerationError, RankingError
from .models import SearchResult
from .services import Services, build_services

router = APIRouter()


class RankRequest(BaseModel):
    """Request model for re-ranking caller-supplied results."""

    query: str
    results: list[SearchResult]
    use_cache: bool = True
    limit: int | None = Field(default=None, ge=1)


class SearchRequest(BaseModel):
    """Request model for natural-language search."""

    query: str
    limit: int = Field(default=10, ge=1, le=50)
    use_cache: bool = True


def _services(request: Request) -> Services:
    return request.app.state.services


def _ranking_error_response(exc: RankingError) -> JSONResponse:
    status = 400 if isinstance(exc.cause, InvalidInputError) else 502
    return JSONResponse({"error": str(exc)}, status_code=status)


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/api/rank")
async def rank_results(payload: RankRequest, request: Request):
    """Rank the given results against the query."""
    ranker = _services(request).ranker
    try:
        if payload.limit is None:
            ranked = await ranker.rank(
                payload.query, payload.results, use_cache=payload.use_cache
            )
        else:
            ranked = await ranker.top_results(
                payload.query,
                payload.results,
                payload.limit,
                use_cache=payload.use_cache,
            )
    except RankingError as exc:
        return _ranking_error_response(exc)

    return {
        "query": payload.query,
        "results": [result.model_dump(exclude_none=True) for result in ranked],
    }


@router.post("/api/search")
async def search(payload: SearchRequest, request: Request):
    """Turn a natural-language query into ranked web results."""
    pipeline = _services(request).pipeline
    if pipeline is None:
        return JSONResponse({"error": "Web search is not configured."}, status_code=503)
    try:
        response = await pipeline.run(
            payload.query, limit=payload.limit, use_cache=payload.use_cache
        )
    except InvalidInputError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    except QueryGenerationError as exc:
        return JSONResponse({"error": str(exc)}, status_code=502)
    except RankingError as exc:
        return _ranking_error_response(exc)

    return response.model_dump(exclude_none=True)


def create_app(services: Services | None = None) -> FastAPI:
    """Create the application; services are built from the environment unless given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        active = services or build_services()
        await active.connect()
        app.state.services = active
        try:
            yield
        finally:
            await active.close()

    application = FastAPI(
        title="search-ranker",
        description="Semantic re-ranking of web search results",
        lifespan=lifespan,
    )
    if services is not None:
        application.state.services = services
    application.include_router(router)
    return application


app = create_app()
