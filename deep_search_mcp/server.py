"""
deep_search_mcp/server.py

MCP server entry point.

Exposes:
  Tools:
    • deep_search       — Google search (web/news/images) → full page content of every hit
    • deep_search_news  — same, restricted to news articles

Configuration is read from the environment once, at start-up (see
core/config.py).  A missing SERPER_API_KEY does not stop the server; it is
reported on the first tool call.
"""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    CallToolResult,
    TextContent,
    Tool,
)

from .core.config import SEARCH_TYPES, Settings
from .core.errors import DeepSearchError
from .tools.deep_search import handle_deep_search, handle_deep_search_news

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "WARNING").upper(), logging.WARNING),
    format="%(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

SERVER_NAME = "deep-search-mcp"
SERVER_VERSION = "2.0.0"

# ---------------------------------------------------------------------------
# Tool input schemas
# ---------------------------------------------------------------------------

_NUM_RESULTS = {
    "type": "integer",
    "minimum": 1,
    "maximum": 10,
    "default": 10,
}

TOOLS = [
    Tool(
        name="deep_search",
        description=(
            "Performs a comprehensive web search by querying Google, fetching the FULL "
            "content from top results using advanced content extraction (Readability "
            "algorithm), and returning consolidated content. Supports web, news, and "
            "image search types. Includes retry logic for reliability."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "The search query to look up",
                },
                "num_results": {
                    **_NUM_RESULTS,
                    "description": "Number of results to fetch (1-10, default: 10)",
                },
                "max_content_per_page": {
                    "type": "integer",
                    "minimum": 5000,
                    "maximum": 100000,
                    "default": 50000,
                    "description": "Maximum characters of content to return per page (5000-100000, default: 50000)",
                },
                "search_type": {
                    "type": "string",
                    "enum": list(SEARCH_TYPES),
                    "default": "web",
                    "description": "Type of search: 'web' for general search, 'news' for news articles, 'images' for image search",
                },
                "include_domains": {
                    "type": "string",
                    "description": "Comma-separated list of domains to include (e.g., 'reddit.com,github.com')",
                },
                "exclude_domains": {
                    "type": "string",
                    "description": "Comma-separated list of domains to exclude (e.g., 'pinterest.com,facebook.com')",
                },
            },
            "required": ["query"],
        },
    ),
    Tool(
        name="deep_search_news",
        description=(
            "Searches for recent news articles on a topic, fetches full article content, "
            "and returns consolidated results. Optimized for news and current events."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "The news topic to search for",
                },
                "num_results": {
                    **_NUM_RESULTS,
                    "description": "Number of news articles to fetch (1-10, default: 10)",
                },
                "max_content_per_page": {
                    "type": "integer",
                    "minimum": 5000,
                    "maximum": 100000,
                    "default": 30000,
                    "description": "Maximum characters per article (default: 30000)",
                },
            },
            "required": ["query"],
        },
    ),
]

_ERROR_PREFIXES = {
    "deep_search": "Error performing deep search",
    "deep_search_news": "Error performing news search",
}

# ---------------------------------------------------------------------------
# Settings (read once at start-up)
# ---------------------------------------------------------------------------

_settings: Optional[Settings] = None


def configure(settings: Settings) -> None:
    global _settings
    _settings = settings


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


# ---------------------------------------------------------------------------
# Server setup
# ---------------------------------------------------------------------------

app = Server(SERVER_NAME)


def _text_result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


@app.list_tools()
async def list_tools() -> list[Tool]:
    return TOOLS


@app.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> CallToolResult:
    prefix = _ERROR_PREFIXES.get(name, "Error")
    try:
        if name == "deep_search":
            report = await handle_deep_search(arguments or {}, get_settings())
        elif name == "deep_search_news":
            report = await handle_deep_search_news(arguments or {}, get_settings())
        else:
            return _text_result(f"Unknown tool: {name}", is_error=True)
        return _text_result(report)
    except DeepSearchError as exc:
        logger.warning("Tool %r failed: %s", name, exc)
        return _text_result(f"{prefix}: {exc}", is_error=True)
    except Exception as exc:
        logger.exception("Tool %r raised: %s", name, exc)
        return _text_result(f"{prefix}: {exc}", is_error=True)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

async def _serve() -> None:
    logger.info("Starting %s v%s on stdio", SERVER_NAME, SERVER_VERSION)
    async with stdio_server() as (read_stream, write_stream):
        await app.run(
            read_stream,
            write_stream,
            app.create_initialization_options(),
        )


def main() -> None:
    configure(Settings.from_env())
    asyncio.run(_serve())


if __name__ == "__main__":
    main()
