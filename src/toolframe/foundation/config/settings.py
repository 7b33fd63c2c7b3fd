"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from toolframe.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.chunking.max_chunk_size
    50000
    >>> settings.logging.level
    'INFO'

    # Or with environment variables:
    # TOOLFRAME_CHUNK_MAX_CHUNK_SIZE=20000
    # TOOLFRAME_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import (
    ByteSize,
    Field,
    PositiveFloat,
    PositiveInt,
    SecretStr,
    computed_field,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_CHUNK_SIZE = 50_000


class ChunkingSettings(BaseSettings):
    """Chunk sizing for oversized tool output."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLFRAME_CHUNK_",
        extra="ignore",
    )

    max_chunk_size: PositiveInt = Field(
        default=DEFAULT_MAX_CHUNK_SIZE,
        description="Character budget per chunk",
    )


class LoggingSettings(BaseSettings):
    """Renderer and minimum level for tool logs."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLFRAME_LOG_",
        extra="ignore",
    )

    level: Literal["VERBOSE", "DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class CommandSettings(BaseSettings):
    """Shell command execution."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLFRAME_COMMAND_",
        extra="ignore",
    )

    shell: str | None = Field(default=None, description="Shell executable; platform default when unset")
    timeout: PositiveFloat = Field(
        default=60.0,
        description="Seconds to wait for output before reporting the process as waiting for input",
    )
    allowed_commands: list[str] = Field(
        default_factory=list,
        description="fnmatch patterns for permitted commands; empty allows everything",
    )
    max_output: PositiveInt = Field(default=DEFAULT_MAX_CHUNK_SIZE, description="Max characters of output kept")


class HttpSettings(BaseSettings):
    """Shared httpx client used by the web tools."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLFRAME_HTTP_",
        extra="ignore",
    )

    timeout: PositiveFloat = Field(default=30.0, description="Default request timeout")
    max_response_size: ByteSize = Field(
        default=ByteSize(10 * 1024 * 1024),
        description="Largest response body fetchWebsite accepts",
    )
    follow_redirects: bool = True
    user_agent: str = "toolframe-http/1.0"


class BridgeSettings(BaseSettings):
    """Naming convention for tools served by an external MCP bridge."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLFRAME_BRIDGE_",
        extra="ignore",
    )

    prefix: str = Field(default="mcp_", min_length=1)
    adapter_name: str = Field(default="mcp", min_length=1)


class SearchSettings(BaseSettings):
    """Tavily web search."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLFRAME_SEARCH_",
        extra="ignore",
    )

    api_key: SecretStr | None = Field(default=None, description="Tavily API key")
    endpoint: str = "https://api.tavily.com/search"
    max_results: PositiveInt = 5

    @computed_field
    @property
    def configured(self) -> bool:
        return self.api_key is not None and bool(self.api_key.get_secret_value())


class ToolframeSettings(BaseSettings):
    """Root settings for the tool framework.

    Loads configuration from environment variables with TOOLFRAME_ prefix.
    Supports nested configuration and .env files.

    Example environment variables:
        TOOLFRAME_DEBUG=true
        TOOLFRAME_CHUNK_MAX_CHUNK_SIZE=20000
        TOOLFRAME_LOG_FORMAT=json
        TOOLFRAME_COMMAND_TIMEOUT=120
        TOOLFRAME_SEARCH_API_KEY=tvly-...
    """

    model_config = SettingsConfigDict(
        env_prefix="TOOLFRAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")
    ignore_files: list[str] = Field(
        default_factory=lambda: [".git", "node_modules", "__pycache__", ".venv"],
        description="Default glob patterns skipped by directory listings",
    )

    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    command: CommandSettings = Field(default_factory=CommandSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    bridge: BridgeSettings = Field(default_factory=BridgeSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)


@lru_cache(maxsize=1)
def get_settings() -> ToolframeSettings:
    """Settings read once from the environment and .env, then reused."""
    return ToolframeSettings()


def clear_settings_cache() -> None:
    """Drop the cached settings so the next get_settings() rereads the environment."""
    get_settings.cache_clear()
