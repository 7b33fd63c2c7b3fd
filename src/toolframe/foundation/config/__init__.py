"""Configuration management using pydantic-settings.

Provides environment-based configuration with type safety and validation,
plus the runtime ConfigStore accessor handed to capabilities.
"""

from .settings import (
    DEFAULT_MAX_CHUNK_SIZE,
    BridgeSettings,
    ChunkingSettings,
    CommandSettings,
    HttpSettings,
    LoggingSettings,
    SearchSettings,
    ToolframeSettings,
    clear_settings_cache,
    get_settings,
)
from .store import ConfigStore

__all__ = [
    "DEFAULT_MAX_CHUNK_SIZE",
    "BridgeSettings",
    "ChunkingSettings",
    "CommandSettings",
    "ConfigStore",
    "HttpSettings",
    "LoggingSettings",
    "SearchSettings",
    "ToolframeSettings",
    "clear_settings_cache",
    "get_settings",
]
