"""
Configuration for paperfetch

Values come from (lowest to highest precedence) the defaults below, an
optional YAML file, ``PAPERFETCH_*`` environment variables and explicit
keyword overrides.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__
from .paths import expand_home

DEFAULT_DOWNLOAD_PATH = "~/Projects/literature"


class Settings(BaseSettings):
    """Runtime settings"""

    model_config = SettingsConfigDict(
        env_prefix="PAPERFETCH_",
        extra="ignore",
    )

    download_path: str = Field(
        DEFAULT_DOWNLOAD_PATH,
        description="Base directory; papers go to {path}/{note-name}/{paper-title}/",
    )
    timeout: int = Field(30, gt=0, description="HTTP timeout in seconds")
    user_agent: str = Field(f"paperfetch/{__version__}", description="HTTP User-Agent")
    log_level: str = Field("WARNING", description="Root logging level for the CLI")

    @field_validator("download_path")
    @classmethod
    def _non_empty_path(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("download_path cannot be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def resolved_download_path(self) -> Path:
        return expand_home(self.download_path)


def _read_yaml(config_path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(config_path).expanduser()
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def load_settings(config_path: Optional[Union[str, Path]] = None, **overrides: Any) -> Settings:
    """
    Build Settings from an optional YAML file, the environment and overrides

    Args:
        config_path: Optional YAML file with top-level setting keys
        **overrides: Explicit values; ``None`` values are ignored

    Returns:
        Settings instance
    """
    file_values = _read_yaml(config_path) if config_path else {}
    explicit = {key: value for key, value in overrides.items() if value is not None}

    # Environment beats the file, explicit overrides beat both.
    env_values = Settings().model_dump(exclude_unset=True)
    merged = {**file_values, **env_values, **explicit}
    return Settings(**merged)
