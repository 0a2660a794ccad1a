"""scopefs configuration management.

Configuration sources (in priority order):
1. Environment variables (SCOPEFS_ prefix)
2. Config file (scopefs.yaml)
3. Defaults
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, EnvSettingsSource, SettingsConfigDict


class FilesystemConfig(BaseModel):
    """Scoped filesystem configuration."""

    # Project root; working and fixture directories are relative to it
    root_directory: str = Field(default_factory=os.getcwd)
    working_directory: str = "tmp/scopefs"
    fixtures_path_prefix: str = "%"
    fixtures_directories: list[str] = Field(
        default_factory=lambda: [
            "features/fixtures",
            "spec/fixtures",
            "test/fixtures",
            "tests/fixtures",
            "fixtures",
        ]
    )
    encoding: str = "utf-8"
    physical_block_size: int = 512
    clean_working_directory: bool = True

    @field_validator("fixtures_path_prefix")
    @classmethod
    def _prefix_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("fixtures_path_prefix must not be empty")
        return value

    @field_validator("physical_block_size")
    @classmethod
    def _block_size_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("physical_block_size must be positive")
        return value

    @property
    def working_root(self) -> Path:
        """Absolute working root (root_directory / working_directory)."""
        return Path(self.root_directory, self.working_directory).absolute()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = False


class Settings(BaseSettings):
    """scopefs settings."""

    model_config = SettingsConfigDict(
        env_prefix="SCOPEFS_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    filesystem: FilesystemConfig = Field(default_factory=FilesystemConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _load_config_file() -> dict:
    """Load configuration from YAML file if exists.

    Looks for config file in order:
    1. SCOPEFS_CONFIG_FILE environment variable
    2. ./scopefs.yaml
    """
    config_paths = [
        os.environ.get("SCOPEFS_CONFIG_FILE"),
        Path("scopefs.yaml"),
    ]

    for path in config_paths:
        if path is None:
            continue
        path = Path(path)
        if path.exists():
            with open(path) as f:
                return yaml.safe_load(f) or {}

    return {}


def _merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Environment variables override individual values from the YAML file;
    keys set in neither keep their defaults.
    """
    env_values = EnvSettingsSource(Settings)()
    return Settings(**_merge(_load_config_file(), env_values))
