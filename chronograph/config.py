"""
Chronograph: Central Config Loader (Pydantic Settings)

Centralizes the default event level used by the helper factories and the
logging bootstrap configuration.

Usage:

from chronograph.config import settings, set_default_event_level

set_default_event_level("Debug")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings

from chronograph.logging.levels import EventLevel


PACKAGE_DIR = Path(__file__).resolve().parent
CONFIG_DIR = PACKAGE_DIR / "configs"


class Settings(BaseSettings):
    """
    Central configuration using Pydantic Settings (v2).
    Overrides order:
    1. Environment variables (CHRONOGRAPH_ prefix)
    2. .env file (optional)
    3. Defaults below
    """

    # -----------------------------
    # Chronograph defaults
    # -----------------------------
    DEFAULT_EVENT_LEVEL: EventLevel = Field(
        EventLevel.INFORMATION,
        description="Event level of chronographs created by helper factories",
    )

    # -----------------------------
    # Logging bootstrap
    # -----------------------------
    LOGGING_YAML: str = str(CONFIG_DIR / "logging.yaml")
    LOG_LEVEL: str = "INFO"

    # -----------------------------
    # Misc Runtime Settings
    # -----------------------------
    ENV: str = Field("dev", description="dev / staging / prod")
    DEBUG: bool = False

    class Config:
        env_prefix = "CHRONOGRAPH_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    def load_yaml(self, path: str) -> Dict[str, Any]:
        """Load a YAML file (logging dictConfig)."""
        if not Path(path).exists():
            raise FileNotFoundError(f"YAML not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)


# Create global settings instance
settings = Settings()

# Process-wide default for helper factories. Changing it affects only
# chronographs created afterwards.
_default_event_level: EventLevel = settings.DEFAULT_EVENT_LEVEL


def get_default_event_level() -> EventLevel:
    return _default_event_level


def set_default_event_level(level: Union[str, EventLevel]) -> None:
    global _default_event_level
    _default_event_level = EventLevel.parse(level)


__all__ = ["settings", "Settings", "get_default_event_level", "set_default_event_level"]
