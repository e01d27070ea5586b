"""Configuration module for serpscrape."""

from serpscrape.config.loader import get_config_path, load_config, save_config
from serpscrape.config.schema import Config, SearchConfig, ToolConfig

__all__ = ["Config", "SearchConfig", "ToolConfig", "get_config_path", "load_config", "save_config"]
