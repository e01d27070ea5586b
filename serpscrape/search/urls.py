"""Result-page URL construction."""

from __future__ import annotations

from datetime import date
from urllib.parse import urlencode

from serpscrape.search.settings import RESERVED_PARAMETERS, SearchSettings

HOME_URL = "https://www.google.{tld}/"
SEARCH_PATH = "https://www.google.{tld}/search"

# Parameter order for each of the four page templates.
SEARCH_TEMPLATE = ("lr", "q", "btnG", "tbs", "safe", "cr", "filter")
SEARCH_NUM_TEMPLATE = ("lr", "q", "num", "btnG", "tbs", "safe", "cr", "filter")
NEXT_PAGE_TEMPLATE = ("lr", "q", "start", "tbs", "safe", "cr", "filter")
NEXT_PAGE_NUM_TEMPLATE = ("lr", "q", "num", "start", "tbs", "safe", "cr", "filter")


def select_template(settings: SearchSettings, start: int) -> tuple[str, ...]:
    """Pick the template for a page from (first page?, default page size?)."""
    if start == 0:
        return SEARCH_TEMPLATE if settings.uses_default_page_size else SEARCH_NUM_TEMPLATE
    return NEXT_PAGE_TEMPLATE if settings.uses_default_page_size else NEXT_PAGE_NUM_TEMPLATE


def build_search_url(query: str, settings: SearchSettings, start: int) -> str:
    """Build the result-page URL for ``query`` at offset ``start``.

    The query is encoded once, by ``urlencode``; template values are never
    pre-encoded.
    """
    values = {
        "lr": f"lang_{settings.lang}",
        "q": query,
        "num": str(settings.num),
        "btnG": "Google Search",
        "start": str(start),
        "tbs": settings.tbs,
        "safe": settings.safe,
        "cr": settings.country,
        "filter": "0",
    }
    params: list[tuple[str, str]] = []
    for name in select_template(settings, start):
        if name == "cr" and not settings.country:
            continue
        params.append((name, values[name]))

    for key, value in settings.extra_params.items():
        if key not in RESERVED_PARAMETERS:
            params.append((key, value))

    return f"{SEARCH_PATH.format(tld=settings.tld)}?{urlencode(params)}"


def build_home_url(tld: str = "com") -> str:
    return HOME_URL.format(tld=tld)


def get_tbs(from_date: date, to_date: date) -> str:
    """Format a custom date range for the ``tbs`` parameter."""
    from_str = from_date.strftime("%m/%d/%Y")
    to_str = to_date.strftime("%m/%d/%Y")
    return f"cdr:1,cd_min:{from_str},cd_max:{to_str}"
