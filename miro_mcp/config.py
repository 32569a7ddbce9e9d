"""Process-level settings for the Miro MCP server.

Settings are read from the environment once at startup and then passed
explicitly to every client and dispatcher.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

# ─── Defaults ────────────────────────────────────────────────────────────────

API_BASE_URL = "https://api.miro.com/v2"
REQUEST_TIMEOUT = 30.0
CHARACTER_LIMIT = 50000
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _env_number(environ: Mapping[str, str], key: str, default, cast=int):
    """Parse a numeric env var, falling back to the default when unset or invalid."""
    raw = environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        return default


class ServerConfig(BaseModel):
    """Settings injected into the client and dispatcher at construction time."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    api_base_url: str = Field(default=API_BASE_URL, description="Versioned Miro REST API root")
    request_timeout: float = Field(default=REQUEST_TIMEOUT, gt=0, description="Outbound timeout in seconds")
    character_limit: int = Field(default=CHARACTER_LIMIT, ge=1, description="Maximum tool response length")
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    max_page_size: int = Field(default=MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    log_level: str = Field(default="INFO")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """Build a config from environment variables."""
        env = os.environ if environ is None else environ
        max_page_size = min(max(_env_number(env, "MAX_PAGE_SIZE", MAX_PAGE_SIZE), 1), MAX_PAGE_SIZE)
        default_page_size = min(max(_env_number(env, "DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE), 1), max_page_size)
        return cls(
            api_base_url=env.get("MIRO_API_BASE_URL", API_BASE_URL).rstrip("/"),
            request_timeout=max(_env_number(env, "MIRO_REQUEST_TIMEOUT", REQUEST_TIMEOUT, float), 0.1),
            character_limit=max(_env_number(env, "CHARACTER_LIMIT", CHARACTER_LIMIT), 1),
            default_page_size=default_page_size,
            max_page_size=max_page_size,
            log_level=env.get("MIRO_MCP_LOG_LEVEL", "INFO").upper(),
        )

    def page_size(self, requested: Optional[int]) -> int:
        """Resolve a caller-supplied page size against the configured limits."""
        if requested is None:
            return min(self.default_page_size, self.max_page_size)
        return max(1, min(requested, self.max_page_size))
