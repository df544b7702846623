"""
core/query.py

Turns a user query plus optional domain filters into a provider query string.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Union


def split_domains(value: Union[str, Iterable[str], None]) -> List[str]:
    """Parse a comma-separated domain list (or a list of strings)."""
    if not value:
        return []
    parts = value.split(",") if isinstance(value, str) else value
    return [p.strip() for p in parts if p and p.strip()]


def build_query(
    query: str,
    include_domains: Optional[List[str]] = None,
    exclude_domains: Optional[List[str]] = None,
) -> str:
    """
    Append ``site:`` / ``-site:`` operators to *query*.

    Domains are passed through verbatim apart from whitespace trimming.
    """
    if include_domains:
        query += " " + " OR ".join(f"site:{d.strip()}" for d in include_domains)
    if exclude_domains:
        query += " " + " ".join(f"-site:{d.strip()}" for d in exclude_domains)
    return query
