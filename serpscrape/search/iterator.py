"""Paginated, de-duplicating search iterator."""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from http.cookiejar import CookieJar
from typing import Any, Awaitable, Callable

from loguru import logger

from serpscrape.search.errors import FetchError
from serpscrape.search.extractor import HtmlLinkExtractor, LinkExtractor
from serpscrape.search.fetcher import HttpPageFetcher, PageFetcher
from serpscrape.search.filters import filter_result
from serpscrape.search.models import RawResultCandidate, SearchResultItem
from serpscrape.search.settings import SearchSettings
from serpscrape.search.urls import build_search_url
from serpscrape.search.user_agents import UserAgentProvider


class SearchState(str, Enum):
    INIT = "init"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    YIELDING = "yielding"
    DONE = "done"
    ERROR = "error"


_TERMINAL_STATES = (SearchState.DONE, SearchState.ERROR)


@dataclass(slots=True)
class PaginationState:
    """Cursor, emitted-result counter and dedup set for one search call."""

    offset: int
    count: int = 0
    seen: set[str] = field(default_factory=set)
    pages: int = 0


class SearchIterator:
    """
    Async iterator over the results of one search.

    Each step of the loop:
    1. Picks a User-Agent and builds the next page URL
    2. Sleeps ``settings.pause`` seconds (before every fetch, the first too)
    3. Fetches and extracts candidate links
    4. Filters and de-duplicates them, queueing survivors in page order
    5. Hands the queued results out one per ``__anext__`` call

    Pages are fetched only when the consumer asks for a result that is not
    queued yet, strictly in increasing offset order. A fetch failure ends the
    iteration (the exception is kept on ``error``) instead of raising into
    the consumer.
    """

    def __init__(
        self,
        query: str,
        settings: SearchSettings | None = None,
        *,
        fetcher: PageFetcher | None = None,
        extractor: LinkExtractor | None = None,
        user_agents: UserAgentProvider | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.query = query
        self.settings = settings or SearchSettings()
        self.settings.validate()

        self.cookie_jar: CookieJar = (
            self.settings.cookie_jar if self.settings.cookie_jar is not None else CookieJar()
        )
        self._fetcher = fetcher or HttpPageFetcher(self.cookie_jar, verify=self.settings.verify_ssl)
        self._extractor = extractor or HtmlLinkExtractor()
        self._user_agents = user_agents or UserAgentProvider()
        self._sleep = sleep

        self.state = SearchState.INIT
        self.error: FetchError | None = None
        self._pagination = PaginationState(offset=self.settings.start)
        self._queue: deque[SearchResultItem] = deque()
        self._page_candidates = 0

    @property
    def count(self) -> int:
        """Number of results emitted so far."""
        return self._pagination.count

    @property
    def offset(self) -> int:
        return self._pagination.offset

    @property
    def finished(self) -> bool:
        return self.state in _TERMINAL_STATES

    def __aiter__(self) -> "SearchIterator":
        return self

    async def __anext__(self) -> SearchResultItem:
        while True:
            if self.state in _TERMINAL_STATES:
                raise StopAsyncIteration

            if self.state is SearchState.INIT:
                self._start()
            elif self.state is SearchState.YIELDING:
                if self._queue:
                    return self._emit()
                self._end_of_page()
            else:
                await self._fetch_page()

    def _start(self) -> None:
        logger.info("Search started: {!r} (start={}, num={}, stop={})",
                    self.query, self.settings.start, self.settings.num, self.settings.stop)
        if self._stop_reached():
            self._finish(SearchState.DONE, "Stop limit {} already reached", self.settings.stop)
            return
        self.state = SearchState.FETCHING

    async def _fetch_page(self) -> None:
        user_agent = self.settings.user_agent or self._user_agents.next()
        url = build_search_url(self.query, self.settings, self._pagination.offset)

        self.state = SearchState.FETCHING
        await self._sleep(self.settings.pause)

        try:
            logger.debug("Fetching {} with UA: {}", url, user_agent)
            html = await self._fetcher.fetch(url, user_agent, self.settings.timeout)
        except FetchError as e:
            self.error = e
            logger.error("Failed to fetch or process page {}: {}", url, e)
            self._finish(SearchState.ERROR, "Search aborted after {} results", self._pagination.count)
            return

        self._pagination.pages += 1
        self.state = SearchState.EXTRACTING
        candidates = self._extractor.extract(html)
        self._page_candidates = len(candidates)
        self._queue_survivors(candidates)
        logger.debug("Page {} (offset {}): {} candidates, {} new results",
                     self._pagination.pages, self._pagination.offset,
                     self._page_candidates, len(self._queue))
        self.state = SearchState.YIELDING

    def _queue_survivors(self, candidates: list[RawResultCandidate]) -> None:
        seen = self._pagination.seen
        for candidate in candidates:
            link = filter_result(candidate.link, self.settings.include_provider_links)
            if link is None or link in seen:
                continue
            seen.add(link)
            self._queue.append(
                SearchResultItem(link=link, title=candidate.title, content=candidate.snippet)
            )

        if candidates and not self._queue:
            logger.info("No new unique results found on this page. Might be the end.")

    def _emit(self) -> SearchResultItem:
        item = self._queue.popleft()
        self._pagination.count += 1
        if self._stop_reached():
            self._queue.clear()
            self._finish(SearchState.DONE, "Reached stop limit: {}", self.settings.stop)
        return item

    def _end_of_page(self) -> None:
        pagination = self._pagination
        if self._page_candidates == 0:
            if pagination.count > 0:
                self._finish(SearchState.DONE, "No result links found on the page. Assuming end of results.")
            elif pagination.offset > 0:
                self._finish(SearchState.DONE, "No new results and no links found on subsequent page. Definite end.")
            else:
                self._finish(SearchState.DONE, "No result links found on the first page.")
            return

        pagination.offset += self.settings.num
        self.state = SearchState.FETCHING

    def _stop_reached(self) -> bool:
        stop = self.settings.stop
        return stop is not None and self._pagination.count >= stop

    def _finish(self, state: SearchState, message: str, *args: Any) -> None:
        self.state = state
        logger.info(message, *args)
        logger.info("Search finished or stopped: {} results from {} pages",
                    self._pagination.count, self._pagination.pages)


def search(
    query: str,
    settings: SearchSettings | None = None,
    **kwargs: Any,
) -> SearchIterator:
    """Return an async iterator over the results for ``query``.

    Raises SearchConfigError immediately when ``settings`` are invalid.
    """
    return SearchIterator(query, settings, **kwargs)


async def lucky(
    query: str,
    settings: SearchSettings | None = None,
    **kwargs: Any,
) -> SearchResultItem | None:
    """Return the first result for ``query`` or None when there is none."""
    base = settings or SearchSettings()
    async for item in search(query, base.replace(num=1, stop=1), **kwargs):
        return item
    return None
