"""Paginated search-result scraping."""

from serpscrape.search.errors import FetchError, FetchTimeoutError, SearchConfigError, SearchError
from serpscrape.search.extractor import HtmlLinkExtractor, LinkExtractor
from serpscrape.search.fetcher import HttpPageFetcher, PageFetcher
from serpscrape.search.filters import filter_result
from serpscrape.search.iterator import SearchIterator, SearchState, lucky, search
from serpscrape.search.models import RawResultCandidate, SearchResultItem
from serpscrape.search.settings import RESERVED_PARAMETERS, SearchSettings
from serpscrape.search.urls import build_home_url, build_search_url, get_tbs
from serpscrape.search.user_agents import DEFAULT_USER_AGENT, UserAgentProvider

__all__ = [
    "DEFAULT_USER_AGENT",
    "FetchError",
    "FetchTimeoutError",
    "HtmlLinkExtractor",
    "HttpPageFetcher",
    "LinkExtractor",
    "PageFetcher",
    "RESERVED_PARAMETERS",
    "RawResultCandidate",
    "SearchConfigError",
    "SearchError",
    "SearchIterator",
    "SearchResultItem",
    "SearchSettings",
    "SearchState",
    "UserAgentProvider",
    "build_home_url",
    "build_search_url",
    "filter_result",
    "get_tbs",
    "lucky",
    "search",
]
