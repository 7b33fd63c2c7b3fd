"""Client protocol for tools served by external MCP servers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class McpCallResult(BaseModel):
    """Outcome of one MCP tool call.

    Attributes:
        found: Whether any configured server exposes the tool
        success: Whether the call completed without a tool-level error
        message: Optional human-readable status
        result: Tool output on success
        error: Error text on failure
    """

    model_config = ConfigDict(frozen=True)

    found: bool = True
    success: bool = True
    message: str | None = None
    result: Any = None
    error: str | None = None


@runtime_checkable
class McpClient(Protocol):
    """Calls a named tool on whichever MCP server provides it."""

    async def call_tool(self, name: str, arguments: Mapping[str, Any]) -> McpCallResult: ...
