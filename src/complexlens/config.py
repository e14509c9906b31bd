"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (COMPLEXLENS__CLASSIFIER__ENDPOINT=http://...)
  2. complexlens.yaml       (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir("complexlens")


def _find_config_file() -> str | None:
    """Return the path of the first complexlens.yaml found, or None."""
    candidates = [
        Path("complexlens.yaml"),
        Path(_DEFAULT_CONFIG_DIR) / "complexlens.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ClassifierSettings(BaseModel):
    endpoint: str = "http://localhost:8000"
    api_key: str = ""
    timeout_seconds: float = Field(default=30.0, gt=0)


class AnnotationSettings(BaseModel):
    enabled: bool = True
    show_metrics: bool = True
    # Hover settle delay. The scheduler's debounce is fixed, see schedulers.py.
    analysis_delay_ms: int = Field(default=300, ge=0)


class CacheSettings(BaseModel):
    ttl_minutes: int = Field(default=5, ge=0)
    max_entries: int = Field(default=1000, ge=1)

    @property
    def ttl(self) -> timedelta:
        return timedelta(minutes=self.ttl_minutes)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: COMPLEXLENS__CACHE__TTL_MINUTES=10
        env_prefix="COMPLEXLENS__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    classifier: ClassifierSettings = ClassifierSettings()
    annotations: AnnotationSettings = AnnotationSettings()
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
