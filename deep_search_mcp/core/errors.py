"""
core/errors.py

Exception hierarchy.

Request-level errors (ConfigurationError, ProviderError) abort a tool call and
are reported to the MCP client as a single error message.  FetchError is
per-URL: it never leaves the fetcher and ends up inline in the report.
"""
from __future__ import annotations

from typing import Optional


class DeepSearchError(Exception):
    """Base class for all errors raised by deep_search_mcp."""


class ConfigurationError(DeepSearchError):
    """Missing or malformed configuration (e.g. no SERPER_API_KEY)."""


class ProviderError(DeepSearchError):
    """The search provider answered with a non-2xx status or was unreachable."""

    def __init__(self, status_code: int, reason: str) -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"Serper API error: {status_code} {reason}".rstrip())


class FetchError(DeepSearchError):
    """A single page could not be fetched."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)
