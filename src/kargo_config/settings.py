"""Kargo settings.

Values come from OS environment variables first, then from the first
existing env file among:

- ``$KARGO_ENV_FILE`` (relative paths resolve against the project root)
- ``config/.env.dev`` for local development
- ``config/.env`` for Docker deployments

and finally from the defaults below.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILE_VAR = "KARGO_ENV_FILE"


def _find_project_root() -> Path:
    """Closest ancestor holding ``config/`` or ``pyproject.toml``."""
    here = Path(__file__).resolve()
    for directory in here.parents:
        if (directory / "config").is_dir():
            return directory
        if (directory / "pyproject.toml").is_file():
            return directory
    return Path.cwd()


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _env_file_candidates() -> list[Path]:
    candidates = []
    override = os.environ.get(_ENV_FILE_VAR)
    if override:
        path = Path(override)
        candidates.append(path if path.is_absolute() else _find_project_root() / path)
    config_dir = get_config_dir()
    candidates += [config_dir / ".env.dev", config_dir / ".env"]
    return candidates


def _resolve_env_file_path() -> Path | None:
    return next((path for path in _env_file_candidates() if path.is_file()), None)


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Kargo"
    debug: bool = False

    # HTTP API
    api_debug: bool = False  # exposes /docs and /openapi.json
    api_cors_origins: str = ""  # comma-separated; empty disables CORS

    # Classifier service
    classifier_service_enabled: bool = True
    classifier_service_url: str = "http://localhost:8001"
    classifier_service_timeout: float = 30.0
    classifier_service_api_key: SecretStr | None = None

    # Batch jobs
    batch_pickup_delay_seconds: float = Field(default=0.5, ge=0.0)
    batch_inter_call_delay_seconds: float = Field(default=1.0, ge=0.0)
    batch_max_retained_jobs: int = Field(default=100, ge=0)  # 0 keeps every job

    log_level: str = "INFO"

    @field_validator("api_cors_origins", mode="before")
    @classmethod
    def _join_cors_origins(cls, value: Any) -> str:
        if isinstance(value, (list, tuple)):
            return ",".join(value)
        return str(value or "")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        origins = self.api_cors_origins.split(",")
        return [origin.strip() for origin in origins if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
