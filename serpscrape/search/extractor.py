"""Candidate link extraction from result pages."""

from __future__ import annotations

from typing import Any, Protocol

from bs4 import BeautifulSoup, Tag

from serpscrape.search.models import RawResultCandidate

# Containers that wrap one organic result, newest layout first.
_RESULT_CONTAINERS: tuple[dict[str, Any], ...] = (
    {"class": "MjjYud"},
    {"class": "g"},
    {"class": "kCrYT"},
    {"class": "ZINbbc"},
    {"data-hveid": True},
)
_SNIPPET_SELECTORS = (".VwiC3b", ".st", ".ITZIwc", ".HGLXqc", ".BNeawe.s3v9rd")
_MAX_SNIPPET_CHARS = 500


class LinkExtractor(Protocol):
    """Turns one HTML document into a flat list of candidates."""

    def extract(self, html: str) -> list[RawResultCandidate]:
        ...


class HtmlLinkExtractor:
    """Extract result candidates with BeautifulSoup.

    Headings (``h3``) inside result anchors are tried first. When the
    layout yields none, every anchor in the ``#search`` block (or the whole
    document) is returned instead.
    """

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser

    def extract(self, html: str) -> list[RawResultCandidate]:
        if not html or not html.strip():
            return []

        soup = BeautifulSoup(html, self.parser)
        candidates = self._from_headings(soup)
        if candidates:
            return candidates
        return self._from_anchors(soup)

    def _from_headings(self, soup: BeautifulSoup) -> list[RawResultCandidate]:
        candidates: list[RawResultCandidate] = []
        for heading in soup.find_all("h3"):
            title = heading.get_text(" ", strip=True)
            if not title:
                continue
            container = self._container_for(heading)
            anchor = heading.find_parent("a", href=True)
            if anchor is None and container is not None:
                anchor = container.find("a", href=True)
            if anchor is None:
                continue
            candidates.append(
                RawResultCandidate(
                    link=str(anchor.get("href", "")),
                    title=title,
                    snippet=self._snippet(container),
                )
            )
        return candidates

    def _from_anchors(self, soup: BeautifulSoup) -> list[RawResultCandidate]:
        root = soup.find(id="search") or soup
        candidates: list[RawResultCandidate] = []
        for anchor in root.find_all("a", href=True):
            candidates.append(
                RawResultCandidate(
                    link=str(anchor.get("href", "")),
                    title=anchor.get_text(" ", strip=True),
                )
            )
        return candidates

    @staticmethod
    def _container_for(heading: Tag) -> Tag | None:
        for attrs in _RESULT_CONTAINERS:
            container = heading.find_parent("div", attrs=attrs)
            if container is not None:
                return container
        return heading.parent if isinstance(heading.parent, Tag) else None

    @staticmethod
    def _snippet(container: Tag | None) -> str:
        if container is None:
            return ""
        for selector in _SNIPPET_SELECTORS:
            node = container.select_one(selector)
            if node is not None:
                return node.get_text(" ", strip=True)[:_MAX_SNIPPET_CHARS]
        return ""
