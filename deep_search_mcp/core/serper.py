"""
core/serper.py

Serper (Google Search API) client.

One POST per search; the endpoint is picked by search type.  Image hits carry
the direct image URL in ``snippet`` so that ``link`` is always the hosting
page and downstream fetching stays type-uniform.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from .config import SEARCH_TYPES, SearchResult
from .errors import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)

SERPER_ENDPOINTS = {
    "web": "https://google.serper.dev/search",
    "news": "https://google.serper.dev/news",
    "images": "https://google.serper.dev/images",
}

MAX_RESULTS = 10


def _to_result(item: dict[str, Any], index: int) -> SearchResult:
    return SearchResult(
        title=item.get("title", ""),
        link=item.get("link", ""),
        snippet=item.get("snippet", ""),
        position=int(item.get("position") or index + 1),
        date=item.get("date") or None,
    )


def parse_response(data: dict[str, Any], search_type: str) -> List[SearchResult]:
    """Map a Serper JSON payload onto SearchResult records."""
    if search_type == "images":
        return [
            SearchResult(
                title=img.get("title", ""),
                link=img.get("link", ""),
                snippet=img.get("imageUrl", ""),
                position=idx + 1,
            )
            for idx, img in enumerate(data.get("images") or [])
        ]
    key = "news" if search_type == "news" else "organic"
    return [_to_result(item, idx) for idx, item in enumerate(data.get(key) or [])]


class SerperClient:
    """Thin async wrapper around the Serper REST API."""

    def __init__(self, api_key: Optional[str], client: httpx.AsyncClient) -> None:
        self._api_key = api_key
        self._client = client

    async def search(
        self,
        query: str,
        num_results: int = 10,
        search_type: str = "web",
    ) -> List[SearchResult]:
        """
        Run one search and return hits in provider order.

        Raises ConfigurationError before touching the network when no API key
        is configured, and ProviderError on any non-2xx answer.
        """
        if not self._api_key:
            raise ConfigurationError("SERPER_API_KEY environment variable is required")
        if search_type not in SEARCH_TYPES:
            raise ValueError(f"Unknown search type: {search_type!r}")

        num_results = max(1, min(num_results, MAX_RESULTS))
        endpoint = SERPER_ENDPOINTS[search_type]

        try:
            resp = await self._client.post(
                endpoint,
                headers={
                    "X-API-KEY": self._api_key,
                    "Content-Type": "application/json",
                },
                json={"q": query, "num": num_results},
            )
        except httpx.RequestError as exc:
            logger.warning("Serper request failed for %r: %s", query, exc)
            raise ProviderError(0, f"{type(exc).__name__}: {exc}") from exc

        if not resp.is_success:
            raise ProviderError(resp.status_code, resp.reason_phrase)

        results = parse_response(resp.json(), search_type)
        logger.info("Serper %s search %r returned %d results", search_type, query, len(results))
        return results
