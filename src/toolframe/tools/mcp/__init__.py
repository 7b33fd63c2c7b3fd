"""Bridge to tools served by external MCP servers."""

from .adapter import McpToolAdapter, McpToolParams, sanitize_arguments
from .client import McpCallResult, McpClient

__all__ = ["McpCallResult", "McpClient", "McpToolAdapter", "McpToolParams", "sanitize_arguments"]
