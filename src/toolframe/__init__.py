"""Toolframe - Typed tool execution framework for coding agents.

Tools are invoked by name with a JSON-like request. Every tool follows one
template (log, validate, run, classify errors), large output is split into
addressable chunks, and failures are reported through a small error
taxonomy.

Quick Start:
    >>> from toolframe import create_tool_system
    >>>
    >>> async with create_tool_system() as system:
    ...     text = await system.execute({
    ...         "type": "readFiles",
    ...         "paths": ["README.md"],
    ...         "options": {"lines": {"from": 1, "to": 20}},
    ...     })

Class-Based Tools:
    >>> from typing import ClassVar, Literal
    >>> from toolframe import BaseTool, ToolCategory, ToolMetadata, ToolParams
    >>>
    >>> class EchoParams(ToolParams):
    ...     type: Literal["echo"] = "echo"
    ...     text: str
    ...
    >>> class EchoTool(BaseTool[EchoParams]):
    ...     metadata = ToolMetadata(
    ...         name="echo",
    ...         description="Echo text back to the caller",
    ...         category=ToolCategory.THINKING,
    ...     )
    ...     params_schema = EchoParams
    ...
    ...     async def run(self, params: EchoParams) -> str:
    ...         return params.text
    >>>
    >>> system.registry.register(EchoTool(system.deps))

Error Handling:
    >>> outcome = await system.invoke({"type": "nope"})
    >>> outcome.unwrap_err().kind
    <ErrorKind.NOT_FOUND: 'NOT_FOUND'>
    >>> system.render(outcome)
    '{"success":false,"error":"Tool not found: nope","type":"NOT_FOUND","tool_name":"nope"}'

MCP Bridge:
    >>> # "mcp_<name>" requests are routed to the "mcp" tool with
    >>> # mcp_tool_name=<name>; supply an McpClient to serve them.
    >>> system = create_tool_system(mcp_client=my_client)
"""

from __future__ import annotations

__version__ = "0.1.0"

# Core
from .core import BaseTool, ToolCategory, ToolDependencies, ToolMetadata, ToolParams, ToolResult

# Errors
from .errors import (
    ChunkIndexOutOfRangeError,
    Err,
    ErrorKind,
    ExecutionError,
    NetworkError,
    Ok,
    PermissionDeniedError,
    RateLimitError,
    ToolError,
    ToolNotFoundError,
    ToolOutcome,
    ToolResponseError,
    ValidationError,
    ValidationResult,
    render_outcome,
    wrap_error,
)

# Chunking
from .chunking import ChunkCategory, ChunkManager, ContentChunk, create_chunks, create_file_chunks

# Text
from .text import LineRange, describe_line_range, filter_by_line_range, validate_line_range

# Registry
from .registry import BridgeConvention, ToolRegistry

# Configuration
from .foundation.config import ConfigStore, ToolframeSettings, clear_settings_cache, get_settings

# Observability
from .observability import BoundLogger, configure_logging, get_logger

# Built-in tools
from .tools import BuiltinRequest, build_default_tools, parse_request

# Assembly
from .system import ToolSystem, create_tool_system

__all__ = [
    "__version__",
    # Core
    "BaseTool", "ToolCategory", "ToolDependencies", "ToolMetadata", "ToolParams", "ToolResult",
    # Errors
    "ErrorKind", "ToolError", "ValidationError", "ExecutionError", "ToolNotFoundError",
    "PermissionDeniedError", "RateLimitError", "NetworkError", "ChunkIndexOutOfRangeError",
    "ToolResponseError", "ValidationResult", "wrap_error",
    "Ok", "Err", "ToolOutcome", "render_outcome",
    # Chunking
    "ChunkCategory", "ChunkManager", "ContentChunk", "create_chunks", "create_file_chunks",
    # Text
    "LineRange", "describe_line_range", "filter_by_line_range", "validate_line_range",
    # Registry
    "BridgeConvention", "ToolRegistry",
    # Configuration
    "ConfigStore", "ToolframeSettings", "get_settings", "clear_settings_cache",
    # Observability
    "BoundLogger", "configure_logging", "get_logger",
    # Tools
    "BuiltinRequest", "build_default_tools", "parse_request",
    # Assembly
    "ToolSystem", "create_tool_system",
]
