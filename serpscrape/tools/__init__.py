"""Agent tools."""

from serpscrape.tools.base import Tool
from serpscrape.tools.factory import build_tool_registry
from serpscrape.tools.google_search import GoogleSearchTool
from serpscrape.tools.registry import ToolRegistry

__all__ = ["Tool", "ToolRegistry", "GoogleSearchTool", "build_tool_registry"]
