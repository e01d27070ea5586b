"""Tool registry factory."""

from http.cookiejar import CookieJar

from serpscrape.config.schema import Config
from serpscrape.search import UserAgentProvider
from serpscrape.tools.google_search import GoogleSearchTool
from serpscrape.tools.registry import ToolRegistry


def build_tool_registry(
    config: Config | None = None,
    *,
    user_agents: UserAgentProvider | None = None,
    cookie_jar: CookieJar | None = None,
) -> ToolRegistry:
    """Build the registry of tools exposed to agents."""
    config = config or Config()
    registry = ToolRegistry()
    registry.register(
        GoogleSearchTool(
            search_config=config.search,
            tool_config=config.tool,
            user_agents=user_agents,
            cookie_jar=cookie_jar,
        )
    )
    return registry
