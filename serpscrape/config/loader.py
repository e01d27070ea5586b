"""Configuration loading utilities."""

import json
from pathlib import Path

from loguru import logger

from serpscrape.config.schema import Config


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".serpscrape" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            data = _migrate_config(data)
            return Config.model_validate(data)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Failed to load config from {}: {}", path, e)
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(by_alias=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def _migrate_config(data: dict) -> dict:
    """Migrate old config formats to current."""
    # Move top-level extraParams -> search.extraParams
    search_cfg = data.setdefault("search", {})
    legacy_extra = data.pop("extraParams", None)
    if legacy_extra and "extraParams" not in search_cfg:
        search_cfg["extraParams"] = legacy_extra

    # Rename search.includeGoogleLinks -> search.includeProviderLinks
    legacy_include = search_cfg.pop("includeGoogleLinks", None)
    if legacy_include is not None and "includeProviderLinks" not in search_cfg:
        search_cfg["includeProviderLinks"] = legacy_include

    # search.pauseMs (milliseconds) -> search.pause (seconds)
    legacy_pause_ms = search_cfg.pop("pauseMs", None)
    if legacy_pause_ms is not None and "pause" not in search_cfg:
        search_cfg["pause"] = float(legacy_pause_ms) / 1000

    # search.verifySsl spelled verifySSL in early files
    legacy_verify = search_cfg.pop("verifySSL", None)
    if legacy_verify is not None and "verifySsl" not in search_cfg:
        search_cfg["verifySsl"] = legacy_verify

    return data
