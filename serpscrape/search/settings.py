"""Per-search settings."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from http.cookiejar import CookieJar
from typing import Any

from serpscrape.search.errors import SearchConfigError

DEFAULT_NUM = 10

# GET parameters owned by the URL builder; extra params may not use these names.
RESERVED_PARAMETERS = (
    "hl",
    "lr",
    "q",
    "num",
    "btnG",
    "start",
    "tbs",
    "safe",
    "cr",
    "filter",
)

SAFE_MODES = ("on", "off")

_TLD_RE = re.compile(r"[a-z0-9.-]+", re.IGNORECASE)


@dataclass(slots=True, frozen=True)
class SearchSettings:
    """Immutable settings for one search invocation.

    Attributes:
        tld: Top level domain of the provider host (``google.<tld>``).
        lang: Language restriction, sent as ``lr=lang_<lang>``.
        tbs: Time-range filter, e.g. ``qdr:d`` or the output of ``get_tbs``.
        safe: Safe search mode, ``on`` or ``off``.
        num: Results requested per page. 10 is the provider default.
        start: Offset of the first result to request.
        stop: Stop after this many results; ``None`` keeps paginating.
        pause: Seconds to wait before every page fetch.
        country: Country restriction code (``cr``); omitted when empty.
        extra_params: Additional GET parameters merged into every URL.
        user_agent: Fixed User-Agent; ``None`` draws a random one per page.
        include_provider_links: Keep links pointing back at the provider.
        cookie_jar: Cookie store shared across pages. A fresh jar is created
            per search when not supplied.
        timeout: Deadline in seconds for each page fetch, redirects and body included.
        verify_ssl: Verify TLS certificates.
    """

    tld: str = "com"
    lang: str = "en"
    tbs: str = "0"
    safe: str = "off"
    num: int = DEFAULT_NUM
    start: int = 0
    stop: int | None = None
    pause: float = 2.0
    country: str = ""
    extra_params: dict[str, str] = field(default_factory=dict)
    user_agent: str | None = None
    include_provider_links: bool = False
    cookie_jar: CookieJar | None = field(default=None, compare=False, repr=False)
    timeout: float = 15.0
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra_params", {str(k): str(v) for k, v in self.extra_params.items()})
        self.validate()

    def validate(self) -> None:
        """Raise SearchConfigError when the settings cannot produce a valid search."""
        for name in RESERVED_PARAMETERS:
            if name in self.extra_params:
                raise SearchConfigError(
                    f'GET parameter "{name}" is overlapping with built-in parameters'
                )
        if self.safe not in SAFE_MODES:
            raise SearchConfigError(f"safe must be one of {SAFE_MODES}")
        if self.num < 1:
            raise SearchConfigError("num must be >= 1")
        if self.start < 0:
            raise SearchConfigError("start must be >= 0")
        if self.stop is not None and self.stop < 0:
            raise SearchConfigError("stop must be >= 0")
        if self.pause < 0:
            raise SearchConfigError("pause must be >= 0")
        if self.timeout <= 0:
            raise SearchConfigError("timeout must be > 0")
        if not self.tld.strip():
            raise SearchConfigError("tld must not be empty")
        if not _TLD_RE.fullmatch(self.tld):
            raise SearchConfigError(f"tld contains invalid characters: {self.tld!r}")

    @property
    def uses_default_page_size(self) -> bool:
        return self.num == DEFAULT_NUM

    def replace(self, **changes: Any) -> "SearchSettings":
        """Return a copy with ``changes`` applied, re-validated."""
        return dataclasses.replace(self, **changes)
