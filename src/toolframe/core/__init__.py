"""Core tool abstractions.

- BaseTool: Template every capability subclasses (validate → run → log → classify)
- ToolMetadata / ToolCategory: Identity and grouping of a tool
- ToolParams: Base for typed request schemas
- ToolResult: Uniform success/error record
- ToolDependencies: Immutable collaborators injected at construction
"""

from .base import (
    BaseTool,
    ToolCategory,
    ToolDependencies,
    ToolMetadata,
    ToolParams,
    ToolResult,
    format_validation_errors,
)

__all__ = [
    "BaseTool",
    "ToolCategory",
    "ToolDependencies",
    "ToolMetadata",
    "ToolParams",
    "ToolResult",
    "format_validation_errors",
]
