"""
core/config.py

Shared dataclasses: Settings, FetchConfig, SearchResult, FetchOutcome.

Settings are read from the environment exactly once, at server start, and
passed explicitly to everything that needs them.

Environment variables:
  SERPER_API_KEY           Serper credential (required for searching)
  DEEP_SEARCH_CONCURRENCY  Pages fetched per window     (default: 5)
  DEEP_SEARCH_MAX_RETRIES  Attempts per page            (default: 3)
  DEEP_SEARCH_TIMEOUT      Per-attempt timeout, seconds (default: 15)
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .errors import ConfigurationError

SEARCH_TYPES: tuple[str, ...] = ("web", "news", "images")

TRUNCATION_MARKER = "\n\n[Content truncated...]"


@dataclass
class FetchConfig:
    """Knobs for the page fetcher (one window of `concurrency` pages at a time)."""
    concurrency: int = 5
    max_retries: int = 3
    base_delay: float = 1.0         # seconds; doubled after every failed attempt
    timeout: float = 15.0           # seconds, per attempt
    max_length: int = 100_000       # chars kept per page after extraction


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    serper_api_key: Optional[str] = None
    fetch: FetchConfig = field(default_factory=FetchConfig)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        fetch = FetchConfig(
            concurrency=_env_int(env, "DEEP_SEARCH_CONCURRENCY", 5),
            max_retries=_env_int(env, "DEEP_SEARCH_MAX_RETRIES", 3),
            timeout=_env_float(env, "DEEP_SEARCH_TIMEOUT", 15.0),
        )
        if fetch.concurrency < 1:
            raise ConfigurationError("DEEP_SEARCH_CONCURRENCY must be >= 1")
        if fetch.max_retries < 1:
            raise ConfigurationError("DEEP_SEARCH_MAX_RETRIES must be >= 1")
        if fetch.timeout <= 0:
            raise ConfigurationError("DEEP_SEARCH_TIMEOUT must be > 0")
        return cls(serper_api_key=env.get("SERPER_API_KEY") or None, fetch=fetch)


@dataclass(frozen=True)
class SearchResult:
    """One ranked hit from the search provider."""
    title: str
    link: str
    snippet: str
    position: int
    date: Optional[str] = None


@dataclass(frozen=True)
class FetchOutcome:
    """Result for a single fetched URL."""
    url: str
    success: bool
    title: str = ""
    content: str = ""
    error: Optional[str] = None
    word_count: Optional[int] = None

    @classmethod
    def failure(cls, url: str, error: str) -> "FetchOutcome":
        return cls(url=url, success=False, error=error)
