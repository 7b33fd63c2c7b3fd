"""Error taxonomy for tools.

- ErrorKind: Coarse failure kinds for programmatic branching
- ToolError and subclasses: Structured exceptions carrying metadata
- wrap_error: Normalize any raised value into the taxonomy
- Ok/Err/ToolOutcome: Value-level outcome for boundary callers
"""

from .errors import (
    ChunkIndexOutOfRangeError,
    ErrorKind,
    ExecutionError,
    NetworkError,
    PermissionDeniedError,
    RateLimitError,
    ToolError,
    ToolNotFoundError,
    ToolResponseError,
    ValidationError,
    error_kind_of,
    is_execution_error,
    is_network_error,
    is_not_found_error,
    is_permission_denied_error,
    is_rate_limit_error,
    is_tool_error,
    is_validation_error,
    to_jsonable,
    wrap_error,
)
from .result import Err, Ok, Result, ToolOutcome, render_outcome
from .types import ErrorRecord, JsonDict, JsonValue, ValidationResult

__all__ = [
    # Taxonomy
    "ErrorKind", "ToolError", "ValidationError", "ExecutionError", "ToolNotFoundError",
    "PermissionDeniedError", "RateLimitError", "NetworkError", "ChunkIndexOutOfRangeError",
    "ToolResponseError", "wrap_error", "error_kind_of", "to_jsonable",
    # Guards
    "is_tool_error", "is_validation_error", "is_execution_error", "is_not_found_error",
    "is_permission_denied_error", "is_rate_limit_error", "is_network_error",
    # Outcome
    "Result", "Ok", "Err", "ToolOutcome", "render_outcome",
    # Records
    "ErrorRecord", "ValidationResult", "JsonDict", "JsonValue",
]
