"""Configuration schema using Pydantic."""

from __future__ import annotations

from http.cookiejar import CookieJar
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from serpscrape.search.settings import SearchSettings


class Base(BaseModel):
    """Base model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchConfig(Base):
    """Defaults for every search started from the CLI or the tool."""

    tld: str = "com"
    lang: str = "en"
    tbs: str = "0"
    safe: Literal["on", "off"] = "off"
    num: int = Field(default=10, ge=1)
    start: int = Field(default=0, ge=0)
    stop: int | None = None
    pause: float = Field(default=2.0, ge=0)  # seconds
    country: str = ""
    extra_params: dict[str, str] = Field(default_factory=dict)
    user_agent: str | None = None
    user_agents_file: str = ""
    include_provider_links: bool = False
    timeout: float = Field(default=15.0, gt=0)  # seconds
    verify_ssl: bool = True

    def to_settings(self, cookie_jar: CookieJar | None = None, **overrides: Any) -> SearchSettings:
        """Build per-search settings, applying non-None ``overrides``."""
        values: dict[str, Any] = {
            "tld": self.tld,
            "lang": self.lang,
            "tbs": self.tbs,
            "safe": self.safe,
            "num": self.num,
            "start": self.start,
            "stop": self.stop,
            "pause": self.pause,
            "country": self.country,
            "extra_params": dict(self.extra_params),
            "user_agent": self.user_agent,
            "include_provider_links": self.include_provider_links,
            "timeout": self.timeout,
            "verify_ssl": self.verify_ssl,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return SearchSettings(cookie_jar=cookie_jar, **values)


class ToolConfig(Base):
    """Limits applied at the agent tool boundary."""

    max_results: int = Field(default=50, ge=1, le=500)


class Config(BaseSettings):
    """Root configuration for serpscrape."""

    search: SearchConfig = Field(default_factory=SearchConfig)
    tool: ToolConfig = Field(default_factory=ToolConfig)

    model_config = SettingsConfigDict(
        env_prefix="SERPSCRAPE_",
        env_nested_delimiter="__",
        alias_generator=to_camel,
        populate_by_name=True,
    )
