"""Shared search models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, frozen=True)
class RawResultCandidate:
    """Link reference extracted from a result page, before filtering."""

    link: str
    title: str = ""
    snippet: str = ""


@dataclass(slots=True, frozen=True)
class SearchResultItem:
    """Resolved search result emitted to callers."""

    link: str
    title: str = ""
    content: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "link": self.link,
            "title": self.title,
            "content": self.content,
        }
