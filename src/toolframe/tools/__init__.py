"""Built-in tools for toolframe.

The set every coding agent needs: file I/O, directory listing, shell access,
web fetch and search, a thinking scratchpad, and the MCP bridge.

Quick Start:
    >>> from toolframe.tools import build_default_tools
    >>> registry.register_many(build_default_tools(deps))

Typed requests:
    >>> req = parse_request({"type": "think", "thought": "plan the refactor"})
    >>> type(req).__name__
    'ThinkParams'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Union

from pydantic import Field, TypeAdapter

from ..core import BaseTool, ToolDependencies
from .command import (
    CommandNotAllowedError,
    CommandOutput,
    CommandRunner,
    ExecuteCommandParams,
    ExecuteCommandTool,
    SubprocessCommandRunner,
)
from .filesystem import (
    ApplyDiffEditParams,
    ApplyDiffEditTool,
    CopyFileParams,
    CopyFileTool,
    CreateFolderParams,
    CreateFolderTool,
    ListFilesParams,
    ListFilesTool,
    MoveFileParams,
    MoveFileTool,
    ReadFilesParams,
    ReadFilesTool,
    WriteToFileParams,
    WriteToFileTool,
)
from .mcp import McpCallResult, McpClient, McpToolAdapter, McpToolParams
from .thinking import ThinkParams, ThinkTool
from .web import FetchWebsiteParams, FetchWebsiteTool, TavilySearchParams, TavilySearchTool

# Closed set of built-in request shapes, discriminated on ``type``.
# Bridged ``mcp_<name>`` requests are open-ended and stay outside it.
BuiltinRequest = Annotated[
    Union[
        ReadFilesParams,
        ListFilesParams,
        WriteToFileParams,
        CreateFolderParams,
        MoveFileParams,
        CopyFileParams,
        ApplyDiffEditParams,
        ExecuteCommandParams,
        FetchWebsiteParams,
        TavilySearchParams,
        ThinkParams,
    ],
    Field(discriminator="type"),
]

_REQUEST_ADAPTER: TypeAdapter[BuiltinRequest] = TypeAdapter(BuiltinRequest)

BUILTIN_TOOLS: tuple[type[BaseTool[Any]], ...] = (
    ReadFilesTool,
    ListFilesTool,
    WriteToFileTool,
    CreateFolderTool,
    MoveFileTool,
    CopyFileTool,
    ApplyDiffEditTool,
    ExecuteCommandTool,
    FetchWebsiteTool,
    TavilySearchTool,
    ThinkTool,
    McpToolAdapter,
)


def parse_request(raw: Mapping[str, Any]) -> BuiltinRequest:
    """Validate a raw mapping into the matching built-in params model.

    Raises:
        pydantic.ValidationError: Unknown ``type`` or invalid fields
    """
    return _REQUEST_ADAPTER.validate_python(dict(raw))


def build_default_tools(deps: ToolDependencies) -> list[BaseTool[Any]]:
    """Instantiate every built-in tool over one shared dependency set."""
    return [tool_cls(deps) for tool_cls in BUILTIN_TOOLS]


__all__ = [
    "BUILTIN_TOOLS",
    "BuiltinRequest",
    "build_default_tools",
    "parse_request",
    # Filesystem
    "ApplyDiffEditParams", "ApplyDiffEditTool",
    "CopyFileParams", "CopyFileTool",
    "CreateFolderParams", "CreateFolderTool",
    "ListFilesParams", "ListFilesTool",
    "MoveFileParams", "MoveFileTool",
    "ReadFilesParams", "ReadFilesTool",
    "WriteToFileParams", "WriteToFileTool",
    # Command
    "CommandNotAllowedError", "CommandOutput", "CommandRunner",
    "ExecuteCommandParams", "ExecuteCommandTool", "SubprocessCommandRunner",
    # Web
    "FetchWebsiteParams", "FetchWebsiteTool", "TavilySearchParams", "TavilySearchTool",
    # Thinking
    "ThinkParams", "ThinkTool",
    # MCP bridge
    "McpCallResult", "McpClient", "McpToolAdapter", "McpToolParams",
]
