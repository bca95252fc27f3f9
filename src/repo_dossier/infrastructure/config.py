"""Application configuration: loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: SecretStr | None = None
    github_api_url: str = "https://api.github.com"
    http_timeout_seconds: float = 30.0
    tree_max_depth: int = Field(default=6, ge=0)

    browser_executable_path: Path | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "browser_executable_path", "puppeteer_executable_path"
        ),
    )
    serverless_chromium_path: Path = Path("/opt/chromium/chromium")
    pdf_timeout_seconds: float = 60.0
    pdf_default_title: str = "dossie"

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
