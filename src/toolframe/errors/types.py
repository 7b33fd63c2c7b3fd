"""Type aliases and serializable records shared by the error taxonomy.

Uses Pydantic models for the structured record handed to log sinks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

# ═══════════════════════════════════════════════════════════════════════════════
# Aliases
# ═══════════════════════════════════════════════════════════════════════════════

# Error metadata and log context are open JSON-ish bags.
JsonScalar = Union[str, int, float, bool, None]
JsonValue = Union[JsonScalar, list[Any], dict[str, Any]]
JsonDict = dict[str, Any]


# ═══════════════════════════════════════════════════════════════════════════════
# Records
# ═══════════════════════════════════════════════════════════════════════════════


class ErrorRecord(BaseModel):
    """Structured form of a ToolError for log sinks.

    Attributes:
        name: Error class name (e.g. "ValidationError")
        message: Human-readable error message
        kind: Taxonomy kind value
        metadata: Open context bag; always carries ``tool_name``
        traceback: Formatted traceback when the error was raised
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "title": "Tool Error Record",
            "examples": [{
                "name": "NetworkError",
                "message": "Tavily API error: 502 Bad Gateway",
                "kind": "NETWORK",
                "metadata": {"tool_name": "tavilySearch", "status_code": 502},
            }],
        },
    )

    name: str
    message: str
    kind: str
    metadata: JsonDict = Field(default_factory=dict)
    traceback: str | None = Field(default=None, repr=False)


@dataclass(slots=True, frozen=True)
class ValidationResult:
    """Outcome of a capability's input validation."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[str]) -> ValidationResult:
        return cls(not errors, list(errors))

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(True, [])
