"""Runtime key/value configuration accessor.

Capabilities read mutable runtime configuration (ignore patterns, API keys,
feature flags) through a ConfigStore rather than reaching into settings or the
environment. The store is seeded from ToolframeSettings and may be updated at
runtime by the host application.

Example:
    >>> store = ConfigStore({"agent_chat_config": {"ignore_files": [".git"]}})
    >>> store.get_nested("agent_chat_config.ignore_files")
    ['.git']
    >>> store.get_with_default("missing", 3)
    3
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from .settings import ToolframeSettings

T = TypeVar("T")

_MISSING = object()
_TRUTHY = frozenset({"1", "true", "yes", "on"})


class ConfigStore:
    """Dictionary-backed configuration store with typed accessors."""

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(data or {}))

    @classmethod
    def from_settings(cls, settings: ToolframeSettings) -> ConfigStore:
        """Seed a store with the values capabilities look up at runtime."""
        api_key = settings.search.api_key.get_secret_value() if settings.search.api_key else None
        return cls({
            "agent_chat_config": {"ignore_files": list(settings.ignore_files)},
            "tavily_search": {
                "api_key": api_key,
                "endpoint": settings.search.endpoint,
                "max_results": settings.search.max_results,
            },
            "http": {"max_response_size": int(settings.http.max_response_size)},
            "bridge": {"prefix": settings.bridge.prefix, "adapter_name": settings.bridge.adapter_name},
            "max_chunk_size": settings.chunking.max_chunk_size,
            "debug": settings.debug,
        })

    # ─────────────────────────────────────────────────────────────────
    # Core Operations
    # ─────────────────────────────────────────────────────────────────

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def has(self, key: str) -> bool:
        return key in self._data

    def delete(self, key: str) -> bool:
        return self._data.pop(key, _MISSING) is not _MISSING

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    # ─────────────────────────────────────────────────────────────────
    # Convenience Accessors
    # ─────────────────────────────────────────────────────────────────

    def get_with_default(self, key: str, default: T) -> T:
        """Value under key, or default when absent or None."""
        value = self._data.get(key)
        return default if value is None else value

    def get_nested(self, path: str, default: Any = None) -> Any:
        """Walk a dot-separated path through nested mappings."""
        node: Any = self._data
        for part in path.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]
        return node

    def get_multiple(self, keys: Iterable[str]) -> dict[str, Any]:
        return {k: self._data.get(k) for k in keys}

    def set_multiple(self, values: Mapping[str, Any]) -> None:
        self._data.update(values)

    def get_str(self, key: str, default: str = "") -> str:
        value = self.get_nested(key)
        return default if value is None else str(value)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get_nested(key)
        if value is None or isinstance(value, bool):
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get_nested(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in _TRUTHY

    def get_list(self, key: str, default: list[Any] | None = None) -> list[Any]:
        value = self.get_nested(key)
        if value is None:
            return list(default or [])
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return list(value)

    def snapshot(self) -> dict[str, Any]:
        """Deep copy of the current contents."""
        return copy.deepcopy(self._data)

    def __repr__(self) -> str:
        return f"ConfigStore(keys={sorted(self._data)})"
