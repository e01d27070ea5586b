"""Exceptions raised by the search pipeline."""


class SearchError(Exception):
    """Base class for search failures."""


class SearchConfigError(SearchError, ValueError):
    """Raised when search settings are invalid (e.g. reserved parameter collision)."""


class FetchError(SearchError):
    """Raised when a result page cannot be fetched."""


class FetchTimeoutError(FetchError):
    """Raised when a result page fetch exceeds its deadline."""
