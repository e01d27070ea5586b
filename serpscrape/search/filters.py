"""Result link filtering."""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

_REDIRECT_PREFIX = "/url?"
_PROVIDER_MARKER = "google"
_BLOCKED_HOST_PREFIXES = ("webcache.googleusercontent", "translate.google")


def filter_result(link: str | None, include_provider_links: bool = False) -> str | None:
    """Return the absolute result URL for ``link``, or None if it is not a result.

    Redirect references (``/url?q=<target>``) are unwrapped. The returned
    link is not normalized, so links differing only in case or trailing
    slash stay distinct.
    """
    if not link:
        return None

    try:
        target = link
        if target.startswith(_REDIRECT_PREFIX):
            params = parse_qs(urlparse(target).query)
            embedded = params.get("q") or params.get("url")
            if not embedded or not embedded[0]:
                return None
            target = embedded[0]

        parsed = urlparse(target)
        if not parsed.scheme or not parsed.netloc:
            return None

        host = parsed.hostname or ""
        if not host:
            return None

        if not include_provider_links and _PROVIDER_MARKER in host:
            return None

        if parsed.path.startswith("/search") or host.startswith(_BLOCKED_HOST_PREFIXES):
            return None

        return target
    except (TypeError, ValueError):
        return None
