"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. BUDGETBUDDY_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / "pyproject.toml").is_file():
            return parent
        if parent == Path("/app"):
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. BUDGETBUDDY_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("BUDGETBUDDY_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "BudgetBuddy"
    debug: bool = False

    # Database (rates are the only table this core owns)
    database_url: str = "sqlite+aiosqlite:///./data/budgetbuddy.db"
    database_echo: bool = False

    # OCR.space text recognition (OCR_ prefix)
    ocr_space_api_key: SecretStr | None = None
    ocr_space_url: str = "https://api.ocr.space/parse/image"
    ocr_space_language: str = "eng"
    ocr_space_engine: int = 2
    ocr_timeout: float = 60.0

    # Ollama structured extraction (OLLAMA_ prefix)
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "gpt-oss:120b-cloud"
    ollama_temperature: float = 0.1
    ollama_timeout: float = 120.0

    # Exchange rates
    exchange_rate_api_url: str = "https://api.exchangerate-api.com/v4/latest"
    exchange_rate_timeout: float = 10.0
    exchange_rate_ttl_minutes: int = 60

    # Canonical currency transactions are normalized into
    accounting_currency: str = "PHP"

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @field_validator("accounting_currency", mode="before")
    @classmethod
    def _normalize_accounting_currency(cls, v: Any) -> str:
        """Store the accounting currency upper-cased."""
        return str(v).strip().upper()

    @field_validator("exchange_rate_ttl_minutes")
    @classmethod
    def _validate_ttl(cls, v: int) -> int:
        if v <= 0:
            msg = "exchange_rate_ttl_minutes must be positive"
            raise ValueError(msg)
        return v


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
