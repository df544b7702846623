"""
tools/deep_search.py

MCP tools: deep_search, deep_search_news

Search Google via Serper, fetch the full content of every hit (windowed,
with retry), and return one consolidated text report.
"""
from __future__ import annotations

from contextlib import AsyncExitStack
from typing import Any, Optional

import httpx

from ..core.config import SEARCH_TYPES, Settings
from ..core.errors import DeepSearchError
from ..core.fetcher import build_http_client
from ..core.pipeline import run_deep_search
from ..core.query import split_domains

MIN_CONTENT_PER_PAGE = 5_000
MAX_CONTENT_PER_PAGE = 100_000


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _require_query(arguments: dict[str, Any]) -> str:
    query = str(arguments.get("query", "")).strip()
    if not query:
        raise DeepSearchError("query is required")
    return query


async def _run(
    settings: Settings,
    client: Optional[httpx.AsyncClient],
    query: str,
    **options: Any,
) -> str:
    async with AsyncExitStack() as stack:
        if client is None:
            client = await stack.enter_async_context(build_http_client(settings.fetch))
        return await run_deep_search(client, settings, query, **options)


async def handle_deep_search(
    arguments: dict[str, Any],
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """
    Run a deep search and return the text report.

    Input schema:
        query                 (str) required
        num_results           (int) optional — 1..10 (default 10)
        max_content_per_page  (int) optional — 5000..100000 chars (default 50000)
        search_type           (str) optional — web | news | images (default web)
        include_domains       (str) optional — comma-separated, e.g. "reddit.com,github.com"
        exclude_domains       (str) optional — comma-separated
    """
    query = _require_query(arguments)

    search_type = str(arguments.get("search_type") or "web").lower()
    if search_type not in SEARCH_TYPES:
        raise DeepSearchError(
            f"search_type must be one of {', '.join(SEARCH_TYPES)}, got {search_type!r}"
        )

    return await _run(
        settings, client, query,
        num_results=_clamp(int(arguments.get("num_results", 10)), 1, 10),
        max_content_per_page=_clamp(
            int(arguments.get("max_content_per_page", 50_000)),
            MIN_CONTENT_PER_PAGE, MAX_CONTENT_PER_PAGE,
        ),
        search_type=search_type,
        include_domains=split_domains(arguments.get("include_domains")),
        exclude_domains=split_domains(arguments.get("exclude_domains")),
    )


async def handle_deep_search_news(
    arguments: dict[str, Any],
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """
    News-only deep search.

    Input schema:
        query                 (str) required
        num_results           (int) optional — 1..10 (default 10)
        max_content_per_page  (int) optional — 5000..100000 chars (default 30000)
    """
    query = _require_query(arguments)

    return await _run(
        settings, client, query,
        num_results=_clamp(int(arguments.get("num_results", 10)), 1, 10),
        max_content_per_page=_clamp(
            int(arguments.get("max_content_per_page", 30_000)),
            MIN_CONTENT_PER_PAGE, MAX_CONTENT_PER_PAGE,
        ),
        search_type="news",
    )
