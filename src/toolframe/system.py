"""Tool system assembly.

``create_tool_system`` wires settings, logging, the config store, the chunk
manager, the external collaborators and every built-in tool into one
ToolSystem. There are no module-level singletons; callers keep the returned
object for the life of the process.

Example:
    >>> async with create_tool_system() as system:
    ...     outcome = await system.invoke({"type": "think", "thought": "list files first"})
    ...     print(system.render(outcome))
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import BaseModel

from .chunking import ChunkManager
from .core import ToolDependencies
from .errors import ToolOutcome, render_outcome
from .foundation.config import ConfigStore, ToolframeSettings, get_settings
from .observability import ToolLogger, configure_logging, get_logger
from .registry import BridgeConvention, ToolRegistry
from .tools import build_default_tools
from .tools.command import CommandRunner, SubprocessCommandRunner
from .tools.mcp import McpClient


class ToolSystem:
    """Settings, shared dependencies and the populated registry.

    Owns the HTTP client and command runner it created and releases them in
    ``aclose``; injected ones are left to the caller.
    """

    __slots__ = ("settings", "deps", "registry", "_owned_http", "_owned_runner")

    def __init__(
        self,
        settings: ToolframeSettings,
        deps: ToolDependencies,
        registry: ToolRegistry,
        *,
        owned_http: httpx.AsyncClient | None = None,
        owned_runner: SubprocessCommandRunner | None = None,
    ) -> None:
        self.settings = settings
        self.deps = deps
        self.registry = registry
        self._owned_http = owned_http
        self._owned_runner = owned_runner

    async def execute(self, request: BaseModel | Mapping[str, Any]) -> Any:
        """Dispatch and return the tool's result, raising on failure."""
        return await self.registry.execute(request)

    async def invoke(self, request: BaseModel | Mapping[str, Any]) -> ToolOutcome:
        """Dispatch without raising: Ok(result) or Err(ToolError)."""
        return await self.registry.dispatch(request)

    @staticmethod
    def render(outcome: ToolOutcome) -> str:
        return render_outcome(outcome)

    async def invoke_text(self, request: BaseModel | Mapping[str, Any]) -> str:
        """Dispatch and serialize the outcome for a plain-text channel."""
        return render_outcome(await self.invoke(request))

    async def aclose(self) -> None:
        if self._owned_runner is not None:
            await self._owned_runner.aclose()
        if self._owned_http is not None:
            await self._owned_http.aclose()

    async def __aenter__(self) -> ToolSystem:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"ToolSystem(tools={len(self.registry)})"


def create_tool_system(
    settings: ToolframeSettings | None = None,
    *,
    logger: ToolLogger | None = None,
    config: ConfigStore | None = None,
    http: httpx.AsyncClient | None = None,
    command_runner: CommandRunner | None = None,
    mcp_client: McpClient | None = None,
    configure: bool = True,
) -> ToolSystem:
    """Build a ToolSystem with every built-in tool registered.

    Args:
        settings: Defaults to ``get_settings()``
        logger: Tool logger; one bound to ``toolframe.tools`` when omitted
        config: Runtime config; seeded from settings when omitted
        http: HTTP client for the web tools; created from settings when omitted
        command_runner: Defaults to a SubprocessCommandRunner from settings
        mcp_client: Bridge client; the mcp tool fails cleanly without one
        configure: Apply the logging settings globally
    """
    settings = settings or get_settings()
    if configure:
        configure_logging(settings.logging.format, settings.logging.level)

    owned_http = None
    if http is None:
        http = owned_http = httpx.AsyncClient(
            timeout=settings.http.timeout,
            follow_redirects=settings.http.follow_redirects,
            headers={"User-Agent": settings.http.user_agent},
        )
    owned_runner = None
    if command_runner is None:
        command_runner = owned_runner = SubprocessCommandRunner(
            shell=settings.command.shell,
            timeout=settings.command.timeout,
            allowed_commands=settings.command.allowed_commands,
            max_output=settings.command.max_output,
        )

    deps = ToolDependencies.create(
        logger=logger or get_logger("toolframe.tools"),
        config=config if config is not None else ConfigStore.from_settings(settings),
        chunks=ChunkManager(settings.chunking.max_chunk_size),
        http=http,
        command_runner=command_runner,
        mcp_client=mcp_client,
    )
    registry = ToolRegistry(
        logger=get_logger("toolframe.registry"),
        bridge=BridgeConvention(prefix=settings.bridge.prefix, adapter_name=settings.bridge.adapter_name),
    )
    registry.register_many(build_default_tools(deps))
    return ToolSystem(settings, deps, registry, owned_http=owned_http, owned_runner=owned_runner)
