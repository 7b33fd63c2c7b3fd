"""Shared fixtures: in-memory logging, injected dependencies, and fakes."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from toolframe.chunking import ChunkManager
from toolframe.core import ToolDependencies
from toolframe.foundation.config import ConfigStore, clear_settings_cache
from toolframe.observability import MemoryRenderer, get_logger
from toolframe.tools.command import CommandNotAllowedError, CommandOutput
from toolframe.tools.mcp import McpCallResult


class FakeCommandRunner:
    """Records calls and replays canned output."""

    def __init__(self, output: CommandOutput | None = None, *, denied: tuple[str, ...] = ()) -> None:
        self.output = output or CommandOutput(stdout="ok\n", stderr="", exit_code=0, pid=4242)
        self.denied = denied
        self.calls: list[tuple[str, Any, Any]] = []

    async def execute(self, command: str, cwd: str) -> CommandOutput:
        self.calls.append(("execute", command, cwd))
        if any(command.startswith(d) for d in self.denied):
            raise CommandNotAllowedError(f"Command not allowed: {command}")
        return self.output

    async def send_input(self, pid: int, stdin: str) -> CommandOutput:
        self.calls.append(("send_input", pid, stdin))
        return self.output


class FakeMcpClient:
    """Answers every call with a fixed result, or raises the configured error."""

    def __init__(self, result: McpCallResult | None = None, error: Exception | None = None) -> None:
        self.result = result or McpCallResult(result={"hits": 3})
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def call_tool(self, name: str, arguments: Mapping[str, Any]) -> McpCallResult:
        self.calls.append((name, dict(arguments)))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(autouse=True)
def fresh_settings() -> object:
    """Settings are cached per process; isolate each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def logs() -> MemoryRenderer:
    return MemoryRenderer()


@pytest.fixture
def runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def mcp_client() -> FakeMcpClient:
    return FakeMcpClient()


@pytest.fixture
def deps(logs: MemoryRenderer, runner: FakeCommandRunner, mcp_client: FakeMcpClient) -> ToolDependencies:
    return ToolDependencies.create(
        logger=get_logger("toolframe.tests", renderer=logs, level="VERBOSE"),
        config=ConfigStore({"agent_chat_config": {"ignore_files": [".git", "node_modules"]}}),
        chunks=ChunkManager(),
        command_runner=runner,
        mcp_client=mcp_client,
    )
