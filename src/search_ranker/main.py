import asyncio
import logging

import uvicorn

from typer import Typer, Option
from typing import Annotated
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .logging_config import configure_logging
from .models import SearchResponse
from .services import build_services

app = Typer()


async def run_search(query: str, limit: int, use_cache: bool) -> SearchResponse:
    services = build_services()
    await services.connect()
    try:
        if services.pipeline is None:
            raise RuntimeError("Web search is not configured.")
        return await services.pipeline.run(query, limit=limit, use_cache=use_cache)
    finally:
        await services.close()


def render_response(console: Console, response: SearchResponse) -> None:
    if response.unfulfilled:
        console.print(
            Panel(
                "This request cannot be answered with a web search.",
                title="Unfulfilled",
                title_align="left",
                border_style="bold red",
            )
        )
        return

    console.print(
        Panel(
            "\n".join(f"- {q}" for q in response.queries),
            title="Search queries",
            title_align="left",
            border_style="bold yellow",
        )
    )
    table = Table(title=f"Results for: {response.query}")
    table.add_column("#", justify="right")
    table.add_column("Similarity", justify="right")
    table.add_column("Title")
    table.add_column("Link", overflow="fold")
    for position, result in enumerate(response.results, start=1):
        table.add_row(
            str(position),
            f"{result.similarity:.3f}",
            result.title,
            result.link or "",
        )
    console.print(table)


@app.command()
def search(
    query: Annotated[
        str,
        Option("--query", "-q", help="Natural-language request to search the web for."),
    ],
    limit: Annotated[
        int, Option("--limit", "-n", help="Maximum number of ranked results.")
    ] = 10,
    no_cache: Annotated[
        bool, Option("--no-cache", help="Bypass the embedding cache.")
    ] = False,
    verbose: Annotated[bool, Option("--verbose", "-v")] = False,
) -> None:
    configure_logging(logging.DEBUG if verbose else logging.INFO)
    console = Console()
    with console.status(status="Searching and ranking..."):
        response = asyncio.run(run_search(query, limit, not no_cache))
    render_response(console, response)


@app.command()
def serve(
    host: Annotated[str, Option("--host")] = "127.0.0.1",
    port: Annotated[int, Option("--port", "-p")] = 8000,
) -> None:
    configure_logging()
    uvicorn.run("search_ranker.server:app", host=host, port=port)
