"""Core configuration.

Centralizes environment variables (pydantic-settings) so the CLI and the
adapters read the backend location, timeouts and page sizes the same way.

Lookup order for values: `LEXIDECK_*` environment variables, then the
project `.env`, then the per-user `.env` written by `doctor set-backend`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from dotenv import dotenv_values, set_key
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.errors import ConfigurationError

APP_DIR_NAME = "lexideck"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def get_user_config_dir() -> Path:
    """Per-user configuration directory.

    - Windows: `%APPDATA%/lexideck`
    - macOS: `~/Library/Application Support/lexideck`
    - elsewhere: `$XDG_CONFIG_HOME/lexideck`, falling back to `~/.config`
    """

    home = Path.home()
    if sys.platform.startswith("win"):
        root = Path(os.environ.get("APPDATA") or home)
    elif sys.platform == "darwin":
        root = home / "Library" / "Application Support"
    else:
        root = Path(os.environ.get("XDG_CONFIG_HOME") or home / ".config")
    return root / APP_DIR_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def read_user_env_vars() -> dict[str, str]:
    """Variables currently stored in the user's .env (empty if there is none)."""

    env_path = get_user_env_file()
    if not env_path.exists():
        return {}
    return {k: v for k, v in dotenv_values(env_path).items() if v is not None}


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Set variables in the user's .env, keeping the ones already there.

    `None` values are skipped.
    """

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(exist_ok=True)
    for key, value in values.items():
        if value is None:
            continue
        set_key(str(env_path), key, value, quote_mode="never")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Values come from `LEXIDECK_*` environment variables, the project `.env`
    and then the user's global `.env`.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEXIDECK_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    backend_url: str | None = Field(
        default=None,
        description="Base URL of the dictionary REST backend.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="lexideck/0.1",
        min_length=1,
        description="User-Agent sent to the backend.",
    )

    word_page_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="`limit` sent to the entries endpoint for each page.",
    )
    words_pages_per_batch: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Entry pages fetched concurrently per word-list batch.",
    )
    history_page_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="`limit` sent to the history endpoint.",
    )

    session_path: Path | None = Field(
        default=None,
        description="Token file override (defaults to the user config dir).",
    )
    log_level: LogLevel = Field(
        default="WARNING",
        description="Root logging level for the CLI (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def require_backend_url(self) -> str:
        """Return the backend base URL without a trailing slash."""

        if not self.backend_url or not self.backend_url.strip():
            raise ConfigurationError(
                "LEXIDECK_BACKEND_URL environment variable is not defined"
            )
        return self.backend_url.strip().rstrip("/")

    def resolved_session_path(self) -> Path:
        if self.session_path is not None:
            return self.session_path
        return get_user_config_dir() / "auth-storage.json"
