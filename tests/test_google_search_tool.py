import json

import httpx
import pytest

from serpscrape.config.schema import Config, SearchConfig, ToolConfig
from serpscrape.tools.factory import build_tool_registry
from serpscrape.tools.google_search import GoogleSearchTool


class FakeResponse:
    def __init__(self, html: str = "", error: Exception | None = None):
        self.content = html.encode("utf-8")
        self.headers = {"content-type": "text/html; charset=UTF-8"}
        self._error = error

    def raise_for_status(self) -> None:
        if self._error:
            raise self._error


def _stub_client(responses: list[FakeResponse], calls: list[dict]):
    class StubClient:
        def __init__(self, **kwargs):
            self.kwargs = kwargs

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def get(self, url, headers=None, timeout=None):
            calls.append({"url": url, "headers": headers, "timeout": timeout, "client": self.kwargs})
            return responses.pop(0)

    return StubClient


def _links(count: int) -> list[tuple[str, str]]:
    return [(f"/url?q=https://example.com/{i}&sa=U", f"Result {i}") for i in range(count)]


def _tool(**tool_kwargs) -> GoogleSearchTool:
    return GoogleSearchTool(search_config=SearchConfig(pause=0), **tool_kwargs)


@pytest.mark.asyncio
async def test_google_search_collects_all_results(monkeypatch, result_page) -> None:
    calls: list[dict] = []
    responses = [FakeResponse(result_page(_links(2))), FakeResponse(result_page([]))]
    monkeypatch.setattr("serpscrape.search.fetcher.httpx.AsyncClient", _stub_client(responses, calls))

    raw = await _tool().execute(query="python asyncio")
    payload = json.loads(raw)

    assert payload["ok"] is True
    assert payload["query"] == "python asyncio"
    assert payload["count"] == 2
    assert payload["results"][0] == {
        "link": "https://example.com/0",
        "title": "Result 0",
        "content": "Snippet 0",
    }
    assert "q=python+asyncio" in calls[0]["url"]
    assert "start=10" in calls[1]["url"]
    assert calls[0]["headers"]["User-Agent"]
    assert calls[0]["client"]["follow_redirects"] is True


@pytest.mark.asyncio
async def test_google_search_stop_is_capped_by_max_results(monkeypatch, result_page) -> None:
    calls: list[dict] = []
    responses = [FakeResponse(result_page(_links(5)))]
    monkeypatch.setattr("serpscrape.search.fetcher.httpx.AsyncClient", _stub_client(responses, calls))

    tool = _tool(tool_config=ToolConfig(max_results=3))
    payload = json.loads(await tool.execute(query="python", stop=10))

    assert payload["count"] == 3
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_google_search_passes_page_options(monkeypatch, result_page) -> None:
    calls: list[dict] = []
    responses = [FakeResponse(result_page(_links(5)))]
    monkeypatch.setattr("serpscrape.search.fetcher.httpx.AsyncClient", _stub_client(responses, calls))

    payload = json.loads(
        await _tool().execute(query="python", num=5, start=10, stop=1, lang="de", tld="de", country="countryDE")
    )

    assert payload["count"] == 1
    url = calls[0]["url"]
    assert url.startswith("https://www.google.de/search?")
    assert "num=5" in url
    assert "start=10" in url
    assert "lr=lang_de" in url
    assert "cr=countryDE" in url


@pytest.mark.asyncio
async def test_google_search_no_results(monkeypatch, result_page) -> None:
    calls: list[dict] = []
    responses = [FakeResponse(result_page([]))]
    monkeypatch.setattr("serpscrape.search.fetcher.httpx.AsyncClient", _stub_client(responses, calls))

    payload = json.loads(await _tool().execute(query="nothing here"))

    assert payload["ok"] is False
    assert payload["results"] == []
    assert payload["error"] == {"code": "no_results", "message": "No results found"}


@pytest.mark.asyncio
async def test_google_search_http_error_wrapped(monkeypatch) -> None:
    calls: list[dict] = []
    responses = [FakeResponse(error=httpx.HTTPError("boom"))]
    monkeypatch.setattr("serpscrape.search.fetcher.httpx.AsyncClient", _stub_client(responses, calls))

    payload = json.loads(await _tool().execute(query="fail"))

    assert payload["ok"] is False
    assert payload["error"]["code"] == "search_failed"
    assert "boom" in payload["error"]["message"]


@pytest.mark.asyncio
async def test_google_search_returns_results_collected_before_failure(monkeypatch, result_page) -> None:
    calls: list[dict] = []
    responses = [
        FakeResponse(result_page(_links(2))),
        FakeResponse(error=httpx.HTTPError("blocked")),
    ]
    monkeypatch.setattr("serpscrape.search.fetcher.httpx.AsyncClient", _stub_client(responses, calls))

    payload = json.loads(await _tool().execute(query="python"))

    assert payload["ok"] is True
    assert payload["count"] == 2


@pytest.mark.asyncio
async def test_google_search_invalid_input() -> None:
    payload = json.loads(await _tool().execute(query="   "))
    assert payload["error"]["code"] == "invalid_input"
    assert payload["error"]["message"] == "query must not be empty"

    colliding = GoogleSearchTool(search_config=SearchConfig(pause=0, extra_params={"q": "x"}))
    payload = json.loads(await colliding.execute(query="python"))
    assert payload["error"]["code"] == "invalid_input"
    assert "overlapping with built-in parameters" in payload["error"]["message"]

    payload = json.loads(await _tool().execute(query="python", tld="co m\x01"))
    assert payload["error"]["code"] == "invalid_input"
    assert "tld contains invalid characters" in payload["error"]["message"]


@pytest.mark.asyncio
async def test_google_search_reuses_cookie_jar_between_calls(monkeypatch, result_page) -> None:
    calls: list[dict] = []
    responses = [FakeResponse(result_page(_links(1))), FakeResponse(result_page(_links(1)))]
    monkeypatch.setattr("serpscrape.search.fetcher.httpx.AsyncClient", _stub_client(responses, calls))

    tool = _tool()
    await tool.execute(query="one", stop=1)
    await tool.execute(query="two", stop=1)

    assert calls[0]["client"]["cookies"] is tool.cookie_jar
    assert calls[1]["client"]["cookies"] is tool.cookie_jar


@pytest.mark.asyncio
async def test_registry_validates_google_search_params() -> None:
    registry = build_tool_registry(Config())

    result = await registry.execute("google_search", {"query": "python", "safe": "maybe"})
    assert result.startswith("Error: Invalid parameters for tool 'google_search'")
    assert "safe must be one of" in result

    result = await registry.execute("google_search", {"num": 5})
    assert "missing required query" in result


def test_registry_exposes_google_search_definition() -> None:
    registry = build_tool_registry()

    assert registry.tool_names == ["google_search"]
    definition = registry.get_definitions()[0]
    assert definition["type"] == "function"
    assert definition["function"]["name"] == "google_search"
    assert definition["function"]["parameters"]["required"] == ["query"]
