"""Foundation - configuration building blocks for toolframe.

Contains: environment-driven settings and the runtime ConfigStore.
"""

from __future__ import annotations

__all__ = [
    "ToolframeSettings", "get_settings", "clear_settings_cache",
    "ChunkingSettings", "LoggingSettings", "CommandSettings", "HttpSettings", "BridgeSettings", "SearchSettings",
    "ConfigStore", "DEFAULT_MAX_CHUNK_SIZE",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in __all__:
        from . import config
        return getattr(config, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
