"""
core/pipeline.py

Deep-search pipeline: build query → Serper search → windowed fetch → report.

Request-level failures (missing credential, provider error) propagate to the
caller; per-page failures are reported inline.
"""
from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from .config import Settings
from .fetcher import fetch_all
from .formatters import assemble_report
from .query import build_query
from .serper import SerperClient

logger = logging.getLogger(__name__)


def no_results_message(query: str, search_type: str) -> str:
    kind = "news" if search_type == "news" else "search"
    return f'No {kind} results found for: "{query}"'


async def run_deep_search(
    client: httpx.AsyncClient,
    settings: Settings,
    query: str,
    *,
    num_results: int = 10,
    max_content_per_page: int = 50_000,
    search_type: str = "web",
    include_domains: Optional[List[str]] = None,
    exclude_domains: Optional[List[str]] = None,
) -> str:
    """Search, fetch every hit, and return the text report."""
    search_query = build_query(query, include_domains, exclude_domains)

    serper = SerperClient(settings.serper_api_key, client)
    results = await serper.search(search_query, num_results, search_type)
    if not results:
        return no_results_message(query, search_type)

    urls = [r.link for r in results]
    batch = await fetch_all(client, urls, settings.fetch)

    logger.info(
        "Deep search %r: %d results, %d fetched",
        query, len(results), sum(1 for o in batch if o.success),
    )
    return assemble_report(query, results, batch, max_content_per_page, search_type)
