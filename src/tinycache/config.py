"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments
  2. Environment variables  (TINYCACHE__CACHE__BACKEND=redis)
  3. tinycache.yaml         (searched in cwd, then the platform config dir)
  4. Hardcoded defaults

The config file is optional, every field has a usable default.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("tinycache")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_DATA_DIR) / "cache.db")


def _find_config_file() -> str | None:
    """Return the path of the first tinycache.yaml found, or None."""
    candidates = [
        Path("tinycache.yaml"),
        Path(platformdirs.user_config_dir("tinycache")) / "tinycache.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # "memory" is process-local: the engine bypasses caching entirely with it
    backend: Literal["memory", "sqlite", "redis"] = "sqlite"
    ttl_hours: int = 24
    db_path: str = _DEFAULT_DB_PATH
    redis_url: str = "redis://localhost:6379/0"
    key_prefix: str = "tinycache:"
    cleanup_interval_hours: int = 6

    @property
    def ttl(self) -> timedelta:
        return timedelta(hours=self.ttl_hours)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: TINYCACHE__CACHE__TTL_HOURS=12
        env_prefix="TINYCACHE__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    cache: CacheSettings = CacheSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
