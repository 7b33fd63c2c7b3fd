"""Central registry for tool lookup and dispatch.

The registry provides:
- Tool registration and lookup by name
- Category-based filtering and statistics
- Dispatch of invocation requests, including bridged names that route
  through the single MCP bridging tool
- Formatted tool descriptions and JSON-schema specs for model prompts
"""

from __future__ import annotations

import re
import time
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from ..core import BaseTool, ToolCategory
from ..errors import Err, Ok, ToolNotFoundError, ToolOutcome, ValidationError, error_kind_of, wrap_error
from ..observability import ToolLogger, get_logger

AnyTool = BaseTool[Any]
Request = BaseModel | Mapping[str, Any]


@dataclass(slots=True, frozen=True)
class BridgeConvention:
    """Reversible name mangling for tools served by an external MCP bridge.

    Example:
        >>> bridge = BridgeConvention()
        >>> bridge.is_bridged("mcp_search")
        True
        >>> bridge.original_name("mcp_search")
        'search'
    """

    prefix: str = "mcp_"
    adapter_name: str = "mcp"
    name_field: str = "mcp_tool_name"

    def is_bridged(self, name: str) -> bool:
        return name.startswith(self.prefix) and len(name) > len(self.prefix)

    def original_name(self, name: str) -> str:
        return name[len(self.prefix):] if self.is_bridged(name) else name

    def bridged_name(self, original: str) -> str:
        return f"{self.prefix}{original}"


@dataclass(slots=True, frozen=True)
class ToolRegistration:
    tool: AnyTool
    category: ToolCategory


class ToolRegistry:
    """Name→tool and category→names maps with dispatch.

    Registration is last-write-wins: re-registering a name replaces the
    earlier tool and logs a warning.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(ThinkTool(deps))
        >>> await registry.execute({"type": "think", "thought": "plan first"})
    """

    __slots__ = ("_tools", "_categories", "_bridge", "_log")

    def __init__(self, *, logger: ToolLogger | None = None, bridge: BridgeConvention | None = None) -> None:
        self._tools: dict[str, ToolRegistration] = {}
        self._categories: dict[ToolCategory, set[str]] = {c: set() for c in ToolCategory}
        self._bridge = bridge or BridgeConvention()
        self._log = logger or get_logger("toolframe.registry")

    @property
    def bridge(self) -> BridgeConvention:
        return self._bridge

    # ─────────────────────────────────────────────────────────────────
    # Registration
    # ─────────────────────────────────────────────────────────────────

    def register(self, tool: AnyTool, category: ToolCategory | str | None = None) -> None:
        """Register a tool under its name, replacing any earlier holder."""
        cat = ToolCategory(category) if category is not None else tool.category
        name = tool.name
        if (previous := self._tools.get(name)) is not None:
            self._log.warning(
                f"Replacing registered tool: {name}",
                tool_name=name,
                previous=type(previous.tool).__name__,
                replacement=type(tool).__name__,
            )
            self._categories[previous.category].discard(name)
        self._tools[name] = ToolRegistration(tool, cat)
        self._categories[cat].add(name)
        self._log.info(f"Registered tool: {name}", category=cat.value, description=tool.description)

    def register_many(self, registrations: Iterable[AnyTool | tuple[AnyTool, ToolCategory | str | None]]) -> None:
        for item in registrations:
            if isinstance(item, tuple):
                self.register(*item)
            else:
                self.register(item)

    def unregister(self, name: str) -> bool:
        """Remove a tool by name. Returns True if found."""
        registration = self._tools.pop(name, None)
        if registration is None:
            return False
        self._categories[registration.category].discard(name)
        self._log.info(f"Unregistered tool: {name}")
        return True

    def clear(self) -> None:
        self._tools.clear()
        for names in self._categories.values():
            names.clear()
        self._log.info("Cleared all registered tools")

    # ─────────────────────────────────────────────────────────────────
    # Lookup
    # ─────────────────────────────────────────────────────────────────

    def get_tool(self, name: str) -> AnyTool | None:
        registration = self._tools.get(name)
        return registration.tool if registration else None

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def __getitem__(self, name: str) -> AnyTool:
        """Get tool by name, raises KeyError if not found."""
        return self._tools[name].tool

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[AnyTool]:
        return (r.tool for r in self._tools.values())

    def get_tools_by_category(self, category: ToolCategory | str) -> list[AnyTool]:
        return [self._tools[n].tool for n in sorted(self._categories[ToolCategory(category)])]

    def get_all_tools(self) -> list[dict[str, str]]:
        return [
            {"name": name, "category": r.category.value, "description": r.tool.description}
            for name, r in self._tools.items()
        ]

    def find_tools(self, pattern: str | re.Pattern[str]) -> list[str]:
        """Names matching pattern; string patterns are case-insensitive."""
        regex = re.compile(pattern, re.IGNORECASE) if isinstance(pattern, str) else pattern
        return [name for name in self._tools if regex.search(name)]

    def get_statistics(self) -> dict[str, Any]:
        return {
            "total_tools": len(self._tools),
            "tools_by_category": {c.value: len(names) for c, names in self._categories.items()},
        }

    def export_state(self) -> dict[str, Any]:
        """Snapshot of registrations for debugging."""
        return {
            "tools": self.get_all_tools(),
            "categories": {c.value: sorted(names) for c, names in self._categories.items()},
        }

    # ─────────────────────────────────────────────────────────────────
    # Dispatch
    # ─────────────────────────────────────────────────────────────────

    def resolve(self, request: Request) -> tuple[AnyTool, Request]:
        """Target tool and the (possibly rewritten) request it receives.

        Raises:
            ValidationError: Request carries no ``type``
            ToolNotFoundError: No tool, or no bridge for a bridged name
        """
        requested = _request_type(request)
        if requested is None:
            raise ValidationError("Request is missing a 'type' field", "registry", _payload(request))

        if self._bridge.is_bridged(requested):
            adapter = self.get_tool(self._bridge.adapter_name)
            if adapter is None:
                raise ToolNotFoundError(requested, "MCP adapter not registered")
            forwarded = {
                **_payload(request),
                "type": self._bridge.adapter_name,
                self._bridge.name_field: self._bridge.original_name(requested),
            }
            return adapter, forwarded

        tool = self.get_tool(requested)
        if tool is None:
            raise ToolNotFoundError(requested)
        return tool, request

    async def execute(self, request: Request) -> Any:
        """Route a request to its tool and return the tool's result.

        Typed errors and ordinary exceptions propagate unchanged after being
        logged with their kind.
        """
        requested = _request_type(request) or "<missing>"
        bridged = self._bridge.is_bridged(requested)
        self._log.info(f"Executing tool: {requested}", original_type=requested, is_mcp=bridged)
        started = time.perf_counter()
        try:
            tool, forwarded = self.resolve(request)
            result = await tool.execute(forwarded)
        except Exception as exc:
            self._log.error(
                f"Tool execution failed: {requested}",
                error=str(exc),
                error_type=type(exc).__name__,
                kind=error_kind_of(exc),
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        self._log.info(
            f"Tool execution succeeded: {requested}",
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return result

    async def dispatch(self, request: Request) -> ToolOutcome:
        """Like execute, but failures come back as Err(ToolError) instead of raising."""
        try:
            return Ok(await self.execute(request))
        except Exception as exc:
            return Err(wrap_error(exc, _request_type(request) or "registry"))

    # ─────────────────────────────────────────────────────────────────
    # Formatting
    # ─────────────────────────────────────────────────────────────────

    def describe(self) -> str:
        """Get formatted descriptions of all tools for prompts."""
        lines = []
        for category, names in self._categories.items():
            if not names:
                continue
            lines.append(f"## {category.value}")
            lines.extend(f"- **{n}**: {self._tools[n].tool.description}" for n in sorted(names))
        return "\n".join(lines)

    def tool_specs(self) -> list[dict[str, Any]]:
        """JSON-schema tool definitions for every registered tool."""
        return [r.tool.tool_spec() for r in self._tools.values()]


def _request_type(request: object) -> str | None:
    if isinstance(request, BaseModel):
        value = getattr(request, "type", None)
    elif isinstance(request, Mapping):
        value = request.get("type")
    else:
        return None
    return value if isinstance(value, str) and value else None


def _payload(request: object) -> Any:
    if isinstance(request, BaseModel):
        return request.model_dump(by_alias=True)
    if isinstance(request, Mapping):
        return dict(request)
    return request
