"""Bridge that forwards ``mcp_<name>`` requests to an McpClient.

The registry rewrites a bridged request to ``type: "mcp"`` and stores the
original tool name in ``mcp_tool_name``; every other field is passed to the
remote tool as its arguments.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ...core import BaseTool, ToolCategory, ToolMetadata, ToolParams, ToolResult
from ...errors import ExecutionError
from .client import McpCallResult, McpClient

_SENSITIVE = ("password", "token", "secret", "key")
_REDACTED = "[REDACTED]"
DEFAULT_PREFIX = "mcp_"


class McpToolParams(ToolParams):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    type: str = Field(..., min_length=1, description="Bridge name or mcp_<tool>")
    mcp_tool_name: str | None = Field(default=None, description="Remote tool name")

    @property
    def arguments(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


def sanitize_arguments(args: Mapping[str, Any], max_length: int = 100) -> dict[str, Any]:
    """Redact secret-looking keys and truncate long strings, recursively."""
    out: dict[str, Any] = {}
    for key, value in args.items():
        if any(s in key.lower() for s in _SENSITIVE):
            out[key] = _REDACTED
        elif isinstance(value, str) and len(value) > max_length:
            out[key] = BaseTool.truncate_for_logging(value, max_length)
        elif isinstance(value, Mapping):
            out[key] = sanitize_arguments(value, max_length)
        else:
            out[key] = value
    return out


class McpToolAdapter(BaseTool[McpToolParams]):
    """Execute tools provided by MCP servers."""

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="mcp",
        description="Execute tools provided by MCP servers",
        category=ToolCategory.MCP,
    )
    params_schema: ClassVar[type[McpToolParams]] = McpToolParams

    @property
    def prefix(self) -> str:
        return self.get_config("bridge.prefix", DEFAULT_PREFIX)

    def remote_name(self, params: McpToolParams) -> str:
        return params.mcp_tool_name or params.type.removeprefix(self.prefix)

    def check(self, params: McpToolParams) -> list[str]:
        if params.mcp_tool_name or (params.type.startswith(self.prefix) and len(params.type) > len(self.prefix)):
            return []
        return ["MCP tool name is required"]

    @property
    def client(self) -> McpClient:
        if self.deps.mcp_client is None:
            raise ExecutionError("No MCP client configured", self.name)
        return self.deps.mcp_client

    async def run(self, params: McpToolParams) -> ToolResult:
        tool_name, args = self.remote_name(params), params.arguments
        self.logger.debug(
            f"Executing MCP tool: {tool_name}",
            tool=self.name,
            original_type=params.type,
            has_args=bool(args),
        )
        client = self.client
        try:
            self.logger.info(f"Calling MCP tool: {tool_name}", tool=self.name)
            outcome: McpCallResult = await client.call_tool(tool_name, args)
        except ExecutionError:
            raise
        except Exception as e:
            self.logger.error(
                f"Error executing MCP tool: {tool_name}",
                tool=self.name,
                error=str(e),
                args=sanitize_arguments(args),
            )
            raise ExecutionError(
                f"Error executing MCP tool {tool_name}: {e}", self.name, e, mcp_tool_name=tool_name, args=args,
            ) from e

        self.logger.info(
            "MCP tool execution completed",
            tool=self.name,
            mcp_tool_name=tool_name,
            success=outcome.success,
            found=outcome.found,
            result_type=type(outcome.result).__name__,
        )
        if not outcome.found:
            raise ExecutionError(
                outcome.message
                or f"MCP tool not found: {tool_name}. Please check if the tool is available in your configured MCP servers.",
                self.name,
                mcp_tool_name=tool_name,
            )
        if not outcome.success:
            raise ExecutionError(
                outcome.message or outcome.error or "MCP tool execution failed",
                self.name,
                mcp_tool_name=tool_name,
                args=args,
            )
        return self.success_result(outcome.message or f"Executed MCP tool: {tool_name}", outcome.result)

    def sanitize_input_for_logging(self, request: BaseModel | Mapping[str, Any]) -> str:
        if isinstance(request, McpToolParams):
            head, args = {"type": request.type, "mcp_tool_name": request.mcp_tool_name}, request.arguments
        else:
            payload = dict(request.model_dump() if isinstance(request, BaseModel) else request)
            head = {"type": payload.pop("type", None), "mcp_tool_name": payload.pop("mcp_tool_name", None)}
            args = payload
        return BaseTool.sanitize_input_for_logging(self, {**head, "args": sanitize_arguments(args)})
