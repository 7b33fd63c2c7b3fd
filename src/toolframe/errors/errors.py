"""Standardized error taxonomy for tools.

Every failure that leaves a capability is a ToolError carrying a coarse
``kind`` for programmatic branching and an open ``metadata`` bag for context.
The metadata always names the originating capability under ``tool_name``.
"""

from __future__ import annotations

import traceback
from enum import StrEnum
from typing import Any, Self

import orjson
from pydantic import BaseModel

from .types import ErrorRecord, JsonDict


class ErrorKind(StrEnum):
    """Taxonomy kinds for tool failures."""
    VALIDATION = "VALIDATION"
    EXECUTION = "EXECUTION"
    NOT_FOUND = "NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    RATE_LIMIT = "RATE_LIMIT"
    NETWORK = "NETWORK"
    UNKNOWN = "UNKNOWN"


# Exception class names that signal upstream throttling
_THROTTLING_NAMES: frozenset[str] = frozenset({
    "ThrottlingException",
    "TooManyRequestsException",
    "TooManyRequestsError",
})

# Pre-computed retryable kinds for O(1) lookup
_RETRYABLE_KINDS: frozenset[ErrorKind] = frozenset({ErrorKind.RATE_LIMIT, ErrorKind.NETWORK})

_JSON_OPTS = orjson.OPT_NON_STR_KEYS


def _json_default(value: object) -> object:
    """Coerce values orjson cannot encode natively."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    return str(value)


def to_jsonable(value: object) -> Any:
    """Round-trip a value through orjson so it only holds JSON types."""
    return orjson.loads(orjson.dumps(value, default=_json_default, option=_JSON_OPTS))


class ToolError(Exception):
    """Base error for all tool failures.

    Attributes:
        message: Human-readable error message
        kind: Taxonomy kind used for branching
        metadata: Context bag, always including ``tool_name``

    Example:
        >>> err = ToolError("boom", ErrorKind.EXECUTION, {"tool_name": "readFiles"})
        >>> err.to_response()
        '{"success":false,"error":"boom","type":"EXECUTION","tool_name":"readFiles"}'
    """

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.UNKNOWN, metadata: JsonDict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.metadata: JsonDict = dict(metadata or {})
        self.metadata.setdefault("tool_name", "unknown")

    @property
    def tool_name(self) -> str:
        return str(self.metadata["tool_name"])

    @property
    def is_retryable(self) -> bool:
        """Whether this error is typically retryable (throttling, network)."""
        return self.kind in _RETRYABLE_KINDS

    def to_record(self) -> ErrorRecord:
        """Structured record for log sinks."""
        tb = "".join(traceback.format_exception(self)) if self.__traceback__ else None
        return ErrorRecord(
            name=type(self).__name__,
            message=self.message,
            kind=self.kind.value,
            metadata=to_jsonable(self.metadata),
            traceback=tb,
        )

    def to_dict(self) -> JsonDict:
        return self.to_record().model_dump(mode="json")

    def to_response(self) -> str:
        """Flattened JSON envelope for plain-text result channels."""
        envelope = {"success": False, "error": self.message, "type": self.kind.value, **self.metadata}
        return orjson.dumps(envelope, default=_json_default, option=_JSON_OPTS).decode()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, kind={self.kind.value}, tool={self.tool_name!r})"


class ValidationError(ToolError):
    """Input failed a capability's validation."""

    def __init__(self, message: str, tool_name: str, input: object = None) -> None:  # noqa: A002
        super().__init__(message, ErrorKind.VALIDATION, {"tool_name": tool_name, "input": input})


class ExecutionError(ToolError):
    """Capability-specific logic failed."""

    def __init__(
        self,
        message: str,
        tool_name: str,
        cause: BaseException | None = None,
        **additional: object,
    ) -> None:
        meta: JsonDict = {"tool_name": tool_name, **additional}
        if cause is not None:
            meta["cause"] = cause
        super().__init__(message, ErrorKind.EXECUTION, meta)
        if cause is not None:
            self.__cause__ = cause


class ToolNotFoundError(ToolError):
    """No capability is registered under the requested name."""

    def __init__(self, tool_name: str, message: str | None = None) -> None:
        super().__init__(message or f"Tool not found: {tool_name}", ErrorKind.NOT_FOUND, {"tool_name": tool_name})


class PermissionDeniedError(ToolError):
    """The requested operation is not permitted."""

    def __init__(self, message: str, tool_name: str, operation: str | None = None) -> None:
        super().__init__(message, ErrorKind.PERMISSION_DENIED, {"tool_name": tool_name, "operation": operation})


class RateLimitError(ToolError):
    """Upstream throttled the request."""

    def __init__(self, message: str, tool_name: str, suggested_alternatives: list[str] | None = None) -> None:
        super().__init__(
            message, ErrorKind.RATE_LIMIT,
            {"tool_name": tool_name, "suggested_alternatives": suggested_alternatives},
        )


class NetworkError(ToolError):
    """Transport or HTTP-level failure."""

    def __init__(self, message: str, tool_name: str, url: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message, ErrorKind.NETWORK, {"tool_name": tool_name, "url": url, "status_code": status_code})


class ChunkIndexOutOfRangeError(ToolError):
    """Requested chunk index falls outside ``1..total``."""

    def __init__(self, requested_index: int, total_chunks: int, tool_name: str = "ChunkManager") -> None:
        super().__init__(
            f"Chunk index {requested_index} is out of range. Valid range: 1 to {total_chunks}",
            ErrorKind.VALIDATION,
            {"tool_name": tool_name, "requested_index": requested_index, "total_chunks": total_chunks},
        )
        self.requested_index = requested_index
        self.total_chunks = total_chunks


class ToolResponseError(Exception):
    """Exception whose message is the JSON error envelope.

    Raised by string-mode capabilities for callers that only consume plain
    text. The typed error stays available on ``error``.
    """

    __slots__ = ("error",)

    def __init__(self, error: ToolError) -> None:
        self.error = error
        super().__init__(error.to_response())

    @classmethod
    def from_error(cls, error: ToolError) -> Self:
        return cls(error)


def wrap_error(error: object, tool_name: str) -> ToolError:
    """Normalize any raised value into the taxonomy. Idempotent for ToolError."""
    if isinstance(error, ToolError):
        return error
    if isinstance(error, ToolResponseError):
        return error.error
    if isinstance(error, BaseException):
        if type(error).__name__ in _THROTTLING_NAMES:
            err: ToolError = RateLimitError(str(error), tool_name)
            err.__cause__ = error
            return err
        return ExecutionError(str(error) or type(error).__name__, tool_name, error)
    message = error if isinstance(error, str) else "Unknown error occurred"
    return ExecutionError(message, tool_name, original_error=error)


def error_kind_of(error: BaseException) -> str:
    """Taxonomy kind of a raised value, or its class name when untyped."""
    if isinstance(error, ToolError):
        return error.kind.value
    if isinstance(error, ToolResponseError):
        return error.error.kind.value
    return type(error).__name__


# ─────────────────────────────────────────────────────────────────────────────
# Type Guards
# ─────────────────────────────────────────────────────────────────────────────


def is_tool_error(error: object) -> bool:
    return isinstance(error, ToolError)


def is_validation_error(error: object) -> bool:
    return isinstance(error, ValidationError)


def is_execution_error(error: object) -> bool:
    return isinstance(error, ExecutionError)


def is_not_found_error(error: object) -> bool:
    return isinstance(error, ToolNotFoundError)


def is_permission_denied_error(error: object) -> bool:
    return isinstance(error, PermissionDeniedError)


def is_rate_limit_error(error: object) -> bool:
    return isinstance(error, RateLimitError)


def is_network_error(error: object) -> bool:
    return isinstance(error, NetworkError)
