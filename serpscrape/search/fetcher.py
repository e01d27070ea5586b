"""HTTP page fetching with cookie persistence and charset decoding."""

from __future__ import annotations

import asyncio
import codecs
import re
from http.cookiejar import CookieJar
from typing import Protocol

import httpx
from loguru import logger

from serpscrape.search.errors import FetchError, FetchTimeoutError

DEFAULT_CHARSET = "utf-8"

_CONTENT_TYPE_CHARSET_RE = re.compile(r"charset=([\w-]+)", re.IGNORECASE)
_META_CHARSET_RE = re.compile(rb"""<meta[^>]*?charset=["']?([\w-]+)""", re.IGNORECASE)


class PageFetcher(Protocol):
    """Fetches one page and returns its decoded text."""

    async def fetch(self, url: str, user_agent: str, timeout: float) -> str:
        ...


def detect_charset(content: bytes, content_type: str = "") -> str:
    """Pick a charset from the Content-Type header, then a <meta> hint, then UTF-8."""
    match = _CONTENT_TYPE_CHARSET_RE.search(content_type or "")
    if match:
        return match.group(1).lower()

    meta = _META_CHARSET_RE.search(content)
    if meta:
        return meta.group(1).decode("ascii").lower()

    return DEFAULT_CHARSET


def decode_body(content: bytes, content_type: str = "") -> str:
    charset = detect_charset(content, content_type)
    try:
        codec = codecs.lookup(charset)
    except LookupError:
        logger.warning("Unsupported charset {}, falling back to UTF-8", charset)
        codec = codecs.lookup(DEFAULT_CHARSET)
    return content.decode(codec.name, errors="replace")


class HttpPageFetcher:
    """GET result pages with a persistent cookie jar.

    Cookies from the jar are sent with every request and ``Set-Cookie``
    headers from each response (including redirect hops) are written back,
    so the jar can be reused across searches to keep a session alive.
    """

    def __init__(
        self,
        cookie_jar: CookieJar | None = None,
        *,
        verify: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cookie_jar = cookie_jar if cookie_jar is not None else CookieJar()
        self.verify = verify
        self._transport = transport

    async def fetch(self, url: str, user_agent: str, timeout: float = 15.0) -> str:
        """Fetch ``url`` and return the decoded body.

        Raises:
            FetchTimeoutError: the request exceeded ``timeout`` seconds.
            FetchError: connection failure or non-2xx status.
        """
        try:
            # httpx timeouts are per phase; the outer deadline bounds the whole fetch.
            async with asyncio.timeout(timeout), httpx.AsyncClient(
                cookies=self.cookie_jar,
                follow_redirects=True,
                verify=self.verify,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    url,
                    headers={"User-Agent": user_agent},
                    timeout=timeout,
                )
                response.raise_for_status()
        except (httpx.TimeoutException, TimeoutError) as e:
            logger.warning("Request timed out after {}s for URL: {}", timeout, url)
            raise FetchTimeoutError(f"Request to {url} timed out after {timeout}s") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise FetchError(f"HTTP Error: {status} {e.response.reason_phrase} for {url}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Request to {url} failed: {e}") from e

        return decode_body(response.content, response.headers.get("content-type", ""))

    async def warm_up(self, url: str, user_agent: str, timeout: float = 15.0) -> bool:
        """Visit ``url`` (usually the provider home page) to prime the cookie jar."""
        try:
            await self.fetch(url, user_agent, timeout)
        except FetchError as e:
            logger.warning("Failed to fetch {} for initial cookies: {}", url, e)
            return False
        logger.debug("Initial fetch of {} succeeded, {} cookies stored", url, len(self.cookie_jar))
        return True
