"""
core/formatters.py

Report assembly: search hits + fetch outcomes → one markdown-ish text report.
Pure functions, no I/O.
"""
from __future__ import annotations

from io import StringIO
from typing import Optional, Sequence

from .config import TRUNCATION_MARKER, FetchOutcome, SearchResult


def truncate(text: str, limit: int) -> str:
    """Hard character cut at *limit* plus the truncation marker."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def _failure_reason(outcome: Optional[FetchOutcome]) -> str:
    if outcome is None:
        return "Not fetched"
    if outcome.success:
        return "No readable content extracted"
    return outcome.error or "Unknown error"


def assemble_report(
    query: str,
    search_results: Sequence[SearchResult],
    batch: Sequence[FetchOutcome],
    max_content_per_page: int,
    search_type: str,
) -> str:
    """
    Render the deep-search report.

    Results appear in search order.  Pages that could not be fetched (or
    yielded no text) show the failure reason and the search snippet instead.
    """
    success_count = sum(1 for o in batch if o.success)
    total_words = sum(o.word_count or 0 for o in batch if o.success)

    buf = StringIO()
    buf.write(f'# Deep Search Results for: "{query}"\n\n')
    buf.write(f"**Search Type:** {search_type}\n")
    buf.write(
        f"**Results:** {len(search_results)} found, "
        f"{success_count} pages fetched successfully\n"
    )
    buf.write(f"**Total Content:** ~{total_words:,} words\n\n")
    buf.write("---\n\n")

    for i, result in enumerate(search_results):
        outcome = batch[i] if i < len(batch) else None

        buf.write(f"## {i + 1}. {result.title}\n")
        buf.write(f"**URL:** {result.link}\n")
        if result.date:
            buf.write(f"**Date:** {result.date}\n")
        buf.write("\n")

        if outcome is not None and outcome.success and outcome.content:
            content = truncate(outcome.content, max_content_per_page)
            buf.write(f"### Full Page Content:\n\n{content}\n\n")
        else:
            buf.write(f"*Could not fetch content: {_failure_reason(outcome)}*\n\n")
            buf.write(f"**Search Snippet:** {result.snippet}\n\n")

        buf.write("---\n\n")

    return buf.getvalue()
