"""
core/extractor.py

HTML → readable article text.

Extraction is a ranked chain of strategies tried in order until one yields
non-empty text:

  1. ReadabilityExtractor — readability-lxml main-article detection
  2. SelectorExtractor    — strip noise tags, take the first known content
                            area (article, main, CMS classes …) or <body>

An exception inside a strategy is logged and treated as "no text"; the next
strategy is tried.  If every strategy comes up empty the page content is "".
"""
from __future__ import annotations

import logging
import re
from typing import Optional, Protocol, Sequence, Tuple

from bs4 import BeautifulSoup
from readability import Document

logger = logging.getLogger(__name__)

RE_WHITESPACE = re.compile(r"\s+")

NOISE_SELECTOR = (
    "script, style, nav, footer, header, aside, noscript, svg, iframe, form, "
    ".ads, .advertisement, .sidebar, .comments, .social-share"
)

CONTENT_SELECTORS: Tuple[str, ...] = (
    "article",
    "main",
    '[role="main"]',
    ".post-content",
    ".article-content",
    ".entry-content",
    ".content",
    "#content",
    ".post",
    ".blog-post",
)


def clean_text(text: str) -> str:
    """Collapse all whitespace runs to single spaces."""
    if not text:
        return ""
    return RE_WHITESPACE.sub(" ", text).strip()


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def extract_title(html: str) -> str:
    """<title>, then og:title, then meta[name=title]."""
    soup = _soup(html)
    if soup.title and soup.title.get_text(strip=True):
        return soup.title.get_text(strip=True)
    for attrs in ({"property": "og:title"}, {"name": "title"}):
        meta = soup.find("meta", attrs=attrs)
        if meta and meta.get("content"):
            return meta["content"].strip()
    return ""


class Extractor(Protocol):
    name: str

    def extract(self, html: str, url: str = "") -> str:
        ...


class ReadabilityExtractor:
    name = "readability"

    def extract(self, html: str, url: str = "") -> str:
        doc = Document(html, url=url or None)
        summary = doc.summary(html_partial=True)
        return clean_text(_soup(summary).get_text(" "))


class SelectorExtractor:
    name = "selectors"

    def __init__(self, selectors: Sequence[str] = CONTENT_SELECTORS) -> None:
        self.selectors = tuple(selectors)

    def extract(self, html: str, url: str = "") -> str:
        soup = _soup(html)
        for tag in soup.select(NOISE_SELECTOR):
            tag.decompose()

        content = ""
        for selector in self.selectors:
            elements = soup.select(selector)
            if elements:
                content = " ".join(el.get_text(" ") for el in elements)
                break

        if not content:
            content = soup.body.get_text(" ") if soup.body else soup.get_text(" ")

        return clean_text(content)


DEFAULT_EXTRACTORS: Tuple[Extractor, ...] = (ReadabilityExtractor(), SelectorExtractor())


def extract_content(
    html: str,
    url: str = "",
    extractors: Optional[Sequence[Extractor]] = None,
) -> str:
    """Return the first non-empty text produced by *extractors*, else ""."""
    for extractor in extractors or DEFAULT_EXTRACTORS:
        try:
            text = extractor.extract(html, url)
        except Exception as exc:
            logger.debug("Extractor %s failed for %s: %s", extractor.name, url or "<html>", exc)
            continue
        if text:
            return text
        logger.debug("Extractor %s found no text for %s", extractor.name, url or "<html>")
    return ""
