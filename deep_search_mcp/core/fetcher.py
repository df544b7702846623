"""
core/fetcher.py

Async HTTP/2 page fetcher with:
  - windowed concurrency (one window of `concurrency` pages at a time)
  - per-URL retry with exponential backoff (429 / 5xx / connection errors)
  - no retry on timeouts or other 4xx responses
  - readability → selector extraction chain
  - content-length guard (2 MB hard cap)
  - structured FetchOutcome output, index-aligned with the input URLs
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

import httpx

from .config import TRUNCATION_MARKER, FetchConfig, FetchOutcome
from .errors import FetchError
from .extractor import Extractor, extract_content, extract_title

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAX_CONTENT_BYTES = 2_000_000  # 2 MB hard cap

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


def _is_retryable_status(status: int) -> bool:
    return status == 429 or not 400 <= status < 500


# ---------------------------------------------------------------------------
# Single request with retry
# ---------------------------------------------------------------------------

async def fetch_with_retry(
    client: httpx.AsyncClient,
    url: str,
    *,
    max_retries: int = 3,
    base_delay: float = 1.0,
    timeout: float = 15.0,
    sleep: Sleep = asyncio.sleep,
) -> httpx.Response:
    """
    GET *url*, retrying up to *max_retries* attempts in total.

    Waits ``base_delay * 2**attempt`` seconds between attempts.  Raises
    FetchError on a timeout, a non-retryable 4xx, or once attempts run out
    (carrying the last observed status).
    """
    last_error: Optional[FetchError] = None

    for attempt in range(max_retries):
        try:
            # httpx timeouts are per phase; wait_for bounds the whole attempt
            resp = await asyncio.wait_for(
                client.get(
                    url,
                    headers=BROWSER_HEADERS,
                    timeout=timeout,
                    follow_redirects=True,
                ),
                timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
            raise FetchError(f"Timeout after {timeout:g}s") from exc
        except httpx.RequestError as exc:
            last_error = FetchError(f"Request error: {type(exc).__name__}")
        else:
            if resp.is_success:
                return resp
            if not _is_retryable_status(resp.status_code):
                raise FetchError(f"HTTP {resp.status_code}", resp.status_code)
            last_error = FetchError(f"HTTP {resp.status_code}", resp.status_code)

        if attempt < max_retries - 1:
            delay = base_delay * 2 ** attempt
            logger.debug(
                "Attempt %d/%d for %s failed (%s); retrying in %.1fs",
                attempt + 1, max_retries, url, last_error, delay,
            )
            await sleep(delay)

    raise last_error or FetchError("Max retries exceeded")


# ---------------------------------------------------------------------------
# Fetch + extract one page
# ---------------------------------------------------------------------------

async def fetch_url(
    client: httpx.AsyncClient,
    url: str,
    config: FetchConfig,
    extractors: Optional[Sequence[Extractor]] = None,
    sleep: Sleep = asyncio.sleep,
) -> FetchOutcome:
    """
    Fetch a single URL and return a FetchOutcome.

    Fetch failures are captured in FetchOutcome.error, never raised.
    """
    try:
        resp = await fetch_with_retry(
            client, url,
            max_retries=config.max_retries,
            base_delay=config.base_delay,
            timeout=config.timeout,
            sleep=sleep,
        )
    except FetchError as exc:
        logger.debug("Fetch failed for %s: %s", url, exc)
        return FetchOutcome.failure(url, str(exc))

    # Size guard: declared length, then what actually arrived
    cl = resp.headers.get("content-length")
    declared = int(cl) if cl and cl.isdigit() else 0
    if max(declared, len(resp.content)) > MAX_CONTENT_BYTES:
        return FetchOutcome.failure(url, "Content too large")

    html = resp.text
    try:
        title = extract_title(html)
    except Exception as exc:
        logger.debug("Title extraction failed for %s: %s", url, exc)
        title = ""
    text = extract_content(html, url, extractors)

    # counted before truncation so it reflects the full article
    word_count = len(text.split())

    if len(text) > config.max_length:
        text = text[:config.max_length] + TRUNCATION_MARKER

    return FetchOutcome(
        url=url,
        success=True,
        title=title,
        content=text,
        word_count=word_count,
    )


# ---------------------------------------------------------------------------
# Windowed batch fetch
# ---------------------------------------------------------------------------

async def fetch_all(
    client: httpx.AsyncClient,
    urls: Sequence[str],
    config: Optional[FetchConfig] = None,
    extractors: Optional[Sequence[Extractor]] = None,
    sleep: Sleep = asyncio.sleep,
) -> List[FetchOutcome]:
    """
    Fetch every URL, ``config.concurrency`` at a time.

    Windows run one after another; pages inside a window run concurrently.
    The result is index-aligned with *urls*: an unexpected error in one fetch
    becomes a failure record at that index.
    """
    config = config or FetchConfig()
    if config.concurrency < 1:
        raise ValueError("concurrency must be >= 1")

    outcomes: List[FetchOutcome] = []

    for start in range(0, len(urls), config.concurrency):
        window = urls[start:start + config.concurrency]
        settled = await asyncio.gather(
            *(fetch_url(client, url, config, extractors, sleep=sleep) for url in window),
            return_exceptions=True,
        )
        for url, result in zip(window, settled):
            if isinstance(result, FetchOutcome):
                outcomes.append(result)
            elif isinstance(result, Exception):
                logger.warning("Unexpected error fetching %s: %r", url, result)
                outcomes.append(FetchOutcome.failure(url, f"Unexpected: {result}"))
            else:
                raise result

    logger.info(
        "Fetched %d/%d pages",
        sum(1 for o in outcomes if o.success), len(outcomes),
    )
    return outcomes


# ---------------------------------------------------------------------------
# Shared async client factory
# ---------------------------------------------------------------------------

def build_http_client(config: Optional[FetchConfig] = None) -> httpx.AsyncClient:
    """
    Build an httpx.AsyncClient sized for one fetch window.

    Use as an async context manager:
        async with build_http_client(config) as client:
            ...
    """
    config = config or FetchConfig()
    return httpx.AsyncClient(
        http2=True,
        follow_redirects=True,
        limits=httpx.Limits(
            max_connections=config.concurrency + 1,
            max_keepalive_connections=config.concurrency,
            keepalive_expiry=30.0,
        ),
        timeout=httpx.Timeout(config.timeout, connect=5.0),
    )
