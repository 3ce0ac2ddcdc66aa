"""Simplified configuration management."""

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from .logging_config import logger


def _load_env_file() -> None:
    """Load .env from root directory if present."""
    env_path = Path(__file__).parent.parent / ".env"
    if not env_path.is_file():
        return
    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if stripped and not stripped.startswith("#") and "=" in stripped:
                key, value = stripped.split("=", 1)
                key, value = key.strip(), value.strip().strip("'\"")
                if key and value and key not in os.environ:
                    os.environ[key] = value
    except OSError as exc:
        logger.warning(".env file could not be read", extra={"error": str(exc), "path": str(env_path)})


_load_env_file()


DEFAULT_APP_NAME = "Session Feed Server"
DEFAULT_APP_VERSION = "0.1.0"

# Interactive UI clients abandon a round trip after this long and retry.
# The history engine itself never times out a read.
CLIENT_ROUND_TRIP_TIMEOUT_SECONDS = 30


def _env_int(name: str, fallback: int) -> int:
    try:
        return int(os.getenv(name, str(fallback)))
    except (TypeError, ValueError):
        return fallback


def _get_port() -> int:
    """Get server port, checking PORT first, then SESSIONFEED_PORT."""
    port = os.getenv("PORT") or os.getenv("SESSIONFEED_PORT")
    if port:
        try:
            return int(port)
        except ValueError:
            pass
    return 3001


def _default_projects_dir() -> Path:
    raw = os.getenv("SESSIONFEED_PROJECTS_DIR")
    if raw:
        return Path(raw).expanduser()
    return Path("~/.claude/projects").expanduser()


class Settings(BaseModel):
    """Application settings with lightweight env fallbacks."""

    # App metadata
    app_name: str = Field(default=DEFAULT_APP_NAME)
    app_version: str = Field(default=DEFAULT_APP_VERSION)

    # Server runtime
    server_host: str = Field(default=os.getenv("SESSIONFEED_HOST", "127.0.0.1"))
    server_port: int = Field(default_factory=_get_port)
    debug: bool = Field(default=os.getenv("DEBUG", "").lower() == "true")

    # Session storage layout
    projects_dir: Path = Field(default_factory=_default_projects_dir)
    session_extension: str = Field(default=".jsonl")
    excluded_session_prefix: str = Field(default="agent-")
    session_index_filename: str = Field(default="sessions-index.json")

    # History pagination tunables (counted in turns, buffer in records)
    history_initial_turns: int = Field(default=_env_int("SESSIONFEED_INITIAL_TURNS", 3), gt=0)
    history_page_turns: int = Field(default=_env_int("SESSIONFEED_PAGE_TURNS", 5), gt=0)
    history_buffer_size: int = Field(default=_env_int("SESSIONFEED_BUFFER_SIZE", 500), gt=0)
    recent_sessions_limit: int = Field(default=_env_int("SESSIONFEED_RECENT_LIMIT", 50), gt=0)

    # HTTP behaviour
    cors_allow_origins_raw: str = Field(default=os.getenv("SESSIONFEED_CORS_ALLOW_ORIGINS", "*"))
    enable_docs: bool = Field(default=os.getenv("SESSIONFEED_ENABLE_DOCS", "1") != "0")
    docs_url: Optional[str] = Field(default=os.getenv("SESSIONFEED_DOCS_URL", "/docs"))

    @property
    def cors_allow_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_allow_origins_raw.strip() in {"", "*"}:
            return ["*"]
        return [origin.strip() for origin in self.cors_allow_origins_raw.split(",") if origin.strip()]

    @property
    def resolved_docs_url(self) -> Optional[str]:
        """Return documentation URL when docs are enabled."""
        return (self.docs_url or "/docs") if self.enable_docs else None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
