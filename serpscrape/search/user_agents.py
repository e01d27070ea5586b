"""User-Agent pool provisioning."""

from __future__ import annotations

import gzip
import random
import zlib
from pathlib import Path

from loguru import logger

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class UserAgentProvider:
    """Hand out random User-Agent strings from a lazily loaded pool.

    The pool is read on first use from ``path`` (or the bundled
    ``user_agents.txt.gz`` / ``user_agents.txt``). Loading failures fall back
    to ``DEFAULT_USER_AGENT`` so ``next()`` always returns a value. The cache
    lives as long as the provider; call ``reset()`` to reload.
    """

    def __init__(self, path: Path | str | None = None, *, rng: random.Random | None = None):
        self.path = Path(path).expanduser() if path else None
        self._rng = rng or random.Random()
        self._agents: list[str] | None = None

    def next(self) -> str:
        agents = self.agents
        return self._rng.choice(agents)

    @property
    def agents(self) -> list[str]:
        if self._agents is None:
            self._agents = self._load()
        return self._agents

    def reset(self) -> None:
        self._agents = None

    def _candidate_paths(self) -> list[Path]:
        if self.path is not None:
            return [self.path]
        return [_DATA_DIR / "user_agents.txt.gz", _DATA_DIR / "user_agents.txt"]

    def _load(self) -> list[str]:
        for path in self._candidate_paths():
            if not path.exists():
                continue
            try:
                if path.suffix == ".gz":
                    text = gzip.decompress(path.read_bytes()).decode("utf-8")
                else:
                    text = path.read_text(encoding="utf-8")
            except (OSError, EOFError, zlib.error, UnicodeDecodeError) as e:
                logger.error("Error loading user agents from {}: {}", path, e)
                return [DEFAULT_USER_AGENT]

            agents = [line.strip() for line in text.splitlines() if line.strip()]
            if not agents:
                logger.warning("No valid user agents in {}, using default", path)
                return [DEFAULT_USER_AGENT]
            logger.debug("Loaded {} user agents from {}", len(agents), path)
            return agents

        logger.warning("User agent file not found, using default user agent")
        return [DEFAULT_USER_AGENT]
