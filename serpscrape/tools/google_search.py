"""Google search tool built on the paginated search iterator."""

from __future__ import annotations

import json
import time
from http.cookiejar import CookieJar
from typing import TYPE_CHECKING, Any

from loguru import logger

from serpscrape.search import SearchConfigError, SearchSettings, UserAgentProvider, search
from serpscrape.tools.base import Tool

if TYPE_CHECKING:
    from serpscrape.config.schema import SearchConfig, ToolConfig


class GoogleSearchTool(Tool):
    """Run a Google search and return every collected result in one payload."""

    name = "google_search"
    description = "Performs Google search and returns results with title, URL and description."
    parameters = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "minLength": 1,
                "description": "Search query to find relevant content",
            },
            "num": {
                "type": "integer",
                "minimum": 1,
                "maximum": 100,
                "description": "Number of results per page (default: 10)",
            },
            "start": {
                "type": "integer",
                "minimum": 0,
                "description": "Start index for results (default: 0)",
            },
            "stop": {
                "type": "integer",
                "minimum": 1,
                "description": "Stop after this many results (default: tool maxResults)",
            },
            "lang": {"type": "string", "description": "Result language, e.g. en"},
            "tld": {"type": "string", "description": "Google top level domain, e.g. com or co.kr"},
            "tbs": {"type": "string", "description": "Time filter, e.g. qdr:d, qdr:w, qdr:m"},
            "safe": {"type": "string", "enum": ["on", "off"], "description": "Safe search"},
            "country": {"type": "string", "description": "Country restriction, e.g. countryUS"},
        },
        "required": ["query"],
    }

    def __init__(
        self,
        search_config: SearchConfig | None = None,
        tool_config: ToolConfig | None = None,
        *,
        user_agents: UserAgentProvider | None = None,
        cookie_jar: CookieJar | None = None,
    ):
        from serpscrape.config.schema import SearchConfig, ToolConfig

        self.search_config = search_config or SearchConfig()
        self.tool_config = tool_config or ToolConfig()
        self.user_agents = user_agents or UserAgentProvider(self.search_config.user_agents_file or None)
        # Shared by all calls of this tool instance so the session survives between searches.
        self.cookie_jar = cookie_jar if cookie_jar is not None else CookieJar()

    async def execute(self, query: str, **kwargs: Any) -> str:
        started_at = time.monotonic()
        try:
            settings = self._build_settings(query, kwargs)
        except (SearchConfigError, ValueError) as e:
            return self._dump(self._error_payload("invalid_input", str(e), started_at=started_at))

        iterator = search(query, settings, user_agents=self.user_agents)
        results: list[dict[str, Any]] = []
        try:
            async for item in iterator:
                results.append(item.to_dict())
        except Exception as e:
            logger.error("google_search failed for {!r}: {}", query, e)
            return self._dump(self._error_payload("search_failed", str(e), started_at=started_at))

        if not results:
            if iterator.error is not None:
                return self._dump(
                    self._error_payload("search_failed", str(iterator.error), started_at=started_at)
                )
            return self._dump(self._error_payload("no_results", "No results found", started_at=started_at))

        if iterator.error is not None:
            logger.warning("google_search returning {} results collected before: {}", len(results), iterator.error)

        return self._dump(
            {
                "ok": True,
                "query": query,
                "count": len(results),
                "results": results,
                "timingMs": _elapsed_ms(started_at),
            }
        )

    def _build_settings(self, query: str, kwargs: dict[str, Any]) -> SearchSettings:
        if not (query or "").strip():
            raise ValueError("query must not be empty")

        max_results = self.tool_config.max_results
        stop = kwargs.get("stop")
        stop = max_results if stop is None else min(int(stop), max_results)

        return self.search_config.to_settings(
            cookie_jar=self.cookie_jar,
            num=kwargs.get("num"),
            start=kwargs.get("start"),
            stop=stop,
            lang=kwargs.get("lang"),
            tld=kwargs.get("tld"),
            tbs=kwargs.get("tbs"),
            safe=kwargs.get("safe"),
            country=kwargs.get("country"),
        )

    @staticmethod
    def _error_payload(code: str, message: str, *, started_at: float | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "ok": False,
            "results": [],
            "error": {
                "code": code,
                "message": message,
            },
        }
        if started_at is not None:
            payload["timingMs"] = _elapsed_ms(started_at)
        return payload

    @staticmethod
    def _dump(payload: dict[str, Any]) -> str:
        return json.dumps(payload, ensure_ascii=False)


def _elapsed_ms(started_at: float) -> int:
    return int((time.monotonic() - started_at) * 1000)
