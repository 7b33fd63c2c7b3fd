"""Core tool abstractions: BaseTool, ToolMetadata, and parameter types.

Every capability subclasses BaseTool and inherits one fixed lifecycle:
log the sanitized input, validate, run, log the outcome with its duration,
and classify any failure through the error taxonomy. Subclasses supply a
typed ``params_schema`` and an async ``run``; everything else is optional.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sized
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

import orjson
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..chunking import ChunkManager
from ..errors import ToolResponseError, ValidationError, ValidationResult, wrap_error
from ..foundation.config import ConfigStore
from ..observability import ToolLogger, get_logger

if TYPE_CHECKING:
    import httpx

    from ..tools.command.runner import CommandRunner
    from ..tools.mcp.client import McpClient


class ToolCategory(StrEnum):
    """Grouping used by the registry and in tool listings."""
    FILESYSTEM = "filesystem"
    COMMAND = "command"
    WEB = "web"
    THINKING = "thinking"
    MCP = "mcp"


class ToolMetadata(BaseModel):
    """Metadata describing a tool.

    Attributes:
        name: Unique dispatch key (e.g. "readFiles")
        description: What the tool does (shown to the model for selection)
        category: Grouping category
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=r"^[A-Za-z][A-Za-z0-9_]*$")
    description: str = Field(..., min_length=10)
    category: ToolCategory


class ToolParams(BaseModel):
    """Base for request schemas; subclasses add ``type: Literal[<name>]``."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class ToolResult(BaseModel):
    """Uniform success/error record returned by typed-mode tools."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    name: str
    message: str
    result: Any = None


@dataclass(slots=True, frozen=True)
class ToolDependencies:
    """Immutable collaborators injected into every tool instance."""

    logger: ToolLogger
    config: ConfigStore
    chunks: ChunkManager
    http: httpx.AsyncClient | None = None
    command_runner: CommandRunner | None = None
    mcp_client: McpClient | None = None
    extras: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        *,
        logger: ToolLogger | None = None,
        config: ConfigStore | None = None,
        chunks: ChunkManager | None = None,
        **services: Any,
    ) -> ToolDependencies:
        """Build dependencies, defaulting whatever is not supplied."""
        return cls(
            logger=logger or get_logger("toolframe.tools"),
            config=config if config is not None else ConfigStore(),
            chunks=chunks or ChunkManager(),
            **services,
        )


TParams = TypeVar("TParams", bound=BaseModel)

_COMPLEX = "[Complex Object]"


def format_validation_errors(exc: PydanticValidationError) -> list[str]:
    """Flatten pydantic errors into ``loc: message`` strings."""
    out: list[str] = []
    for err in exc.errors(include_url=False):
        loc = ".".join(str(p) for p in err.get("loc", ()))
        out.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return out


def _as_payload(request: BaseModel | Mapping[str, Any]) -> Any:
    if isinstance(request, BaseModel):
        return request.model_dump(mode="json", by_alias=True)
    return dict(request) if isinstance(request, Mapping) else request


class BaseTool(ABC, Generic[TParams]):
    """Abstract base class for all tools.

    Subclasses must:
    - Define `metadata` class variable with ToolMetadata
    - Define `params_schema` class variable with the Pydantic model type
    - Implement async `run(params)`

    Optional overrides:
    - `check(params)` for semantic validation beyond the schema
    - `validate_input(request)` to replace validation entirely
    - `sanitize_input_for_logging(request)` to redact or truncate logged input
    - `error_as_string` to choose between JSON-string and typed errors

    Example:
        >>> class EchoParams(ToolParams):
        ...     type: Literal["echo"] = "echo"
        ...     text: str
        ...
        >>> class EchoTool(BaseTool[EchoParams]):
        ...     metadata = ToolMetadata(name="echo", description="Echo text back", category="thinking")
        ...     params_schema = EchoParams
        ...
        ...     async def run(self, params: EchoParams) -> str:
        ...         return params.text
        ...
        >>> await EchoTool(ToolDependencies.create()).execute({"type": "echo", "text": "hi"})
        'hi'
    """

    metadata: ClassVar[ToolMetadata]
    params_schema: ClassVar[type[BaseModel]]

    # True: failures leave as ToolResponseError carrying the JSON envelope
    error_as_string: ClassVar[bool] = True

    __slots__ = ("deps",)

    def __init__(self, deps: ToolDependencies) -> None:
        self.deps = deps

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def description(self) -> str:
        return self.metadata.description

    @property
    def category(self) -> ToolCategory:
        return self.metadata.category

    @property
    def logger(self) -> ToolLogger:
        return self.deps.logger

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────

    async def execute(self, request: BaseModel | Mapping[str, Any]) -> Any:
        """Validate, run, log and classify. The only entry point callers use.

        Raises:
            ToolResponseError: On failure when ``error_as_string`` is set
            ToolError: On failure otherwise
        """
        started = time.perf_counter()
        self.logger.info(f"Executing {self.name}", tool=self.name, input=self.sanitize_input_for_logging(request))
        try:
            validation = self.validate_input(request)
            if not validation.is_valid:
                raise ValidationError(", ".join(validation.errors), self.name, _as_payload(request))
            result = await self.run(self.parse_params(request))
        except Exception as exc:
            error = wrap_error(exc, self.name)
            self.logger.error(
                f"Error in {self.name}",
                tool=self.name,
                duration_ms=_elapsed_ms(started),
                error=error.message,
                kind=error.kind.value,
            )
            if self.error_as_string:
                raise ToolResponseError(error) from exc
            if error is exc:
                raise
            raise error from exc

        self.logger.info(
            f"Completed {self.name}",
            tool=self.name,
            duration_ms=_elapsed_ms(started),
            result_type=type(result).__name__,
            result_size=len(result) if isinstance(result, Sized) else None,
        )
        return result

    def validate_input(self, request: BaseModel | Mapping[str, Any]) -> ValidationResult:
        """Schema validation followed by the ``check`` hook."""
        try:
            params = self.parse_params(request)
        except PydanticValidationError as e:
            return ValidationResult.from_errors(format_validation_errors(e))
        return ValidationResult.from_errors(self.check(params))

    def parse_params(self, request: BaseModel | Mapping[str, Any]) -> TParams:
        if isinstance(request, self.params_schema):
            return request  # type: ignore[return-value]
        return self.params_schema.model_validate(_as_payload(request))  # type: ignore[return-value]

    def check(self, params: TParams) -> list[str]:
        """Semantic violations the schema cannot express. Empty means valid."""
        return []

    @abstractmethod
    async def run(self, params: TParams) -> Any:
        """Capability-specific logic. May raise; the template classifies it."""
        ...

    def sanitize_input_for_logging(self, request: BaseModel | Mapping[str, Any]) -> str:
        """Best-effort JSON projection of the request for the start log line."""
        try:
            return orjson.dumps(_as_payload(request)).decode()
        except (TypeError, orjson.JSONEncodeError):
            return _COMPLEX

    def truncated_projection(self, request: BaseModel | Mapping[str, Any], **limits: int) -> str:
        """Log projection with the named string fields truncated to their limits."""
        payload = _as_payload(request)
        if isinstance(payload, dict):
            for key, limit in limits.items():
                if isinstance(payload.get(key), str):
                    payload[key] = self.truncate_for_logging(payload[key], limit)
        return BaseTool.sanitize_input_for_logging(self, payload)

    # ─────────────────────────────────────────────────────────────────
    # Shared Helpers
    # ─────────────────────────────────────────────────────────────────

    def success_result(self, message: str, result: Any = None) -> ToolResult:
        return ToolResult(success=True, name=self.name, message=message, result=result)

    def error_result(self, error: BaseException | str, **details: Any) -> ToolResult:
        message = getattr(error, "message", None) or str(error)
        return ToolResult(success=False, name=self.name, message=message, result=details or None)

    @staticmethod
    def format_path(path: str | Any) -> str:
        """Normalize path separators to forward slashes."""
        return str(path).replace("\\", "/")

    @staticmethod
    def truncate_for_logging(text: str, max_length: int = 100) -> str:
        return text if len(text) <= max_length else f"{text[:max_length]}..."

    def get_config(self, key: str, default: Any = None) -> Any:
        """Runtime configuration value; dot paths reach nested keys."""
        value = self.deps.config.get_nested(key)
        return default if value is None else value

    def is_feature_enabled(self, key: str) -> bool:
        return self.get_config(key) is True

    def tool_spec(self) -> dict[str, Any]:
        """Name, description and JSON schema for model tool definitions."""
        schema = self.params_schema.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.get("properties", {}).pop("type", None)
        if "required" in schema:
            schema["required"] = [r for r in schema["required"] if r != "type"]
        return {"name": self.name, "description": self.description, "input_schema": schema}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, category={self.category.value!r})"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
