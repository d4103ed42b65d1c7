"""Application configuration — loaded from environment variables."""

from __future__ import annotations

import os
import tempfile
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_cache_dir() -> Path:
    # Per process: cached bytes of a moving ref must not outlive this run.
    return Path(tempfile.gettempdir()) / f"github-fs-cache-{os.getpid()}"


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: SecretStr | None = None
    http_timeout_seconds: float = 30.0
    cache_dir: Path = Field(default_factory=_default_cache_dir)
    user_agent: str = "github-fs/1.0"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
