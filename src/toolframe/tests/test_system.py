"""End-to-end tests through create_tool_system."""

from __future__ import annotations

from pathlib import Path

import httpx
import orjson
import pydantic
import pytest
from conftest import FakeCommandRunner, FakeMcpClient

from toolframe import ToolSystem, create_tool_system
from toolframe.errors import ErrorKind, ToolResponseError
from toolframe.foundation.config import (
    BridgeSettings,
    ChunkingSettings,
    LoggingSettings,
    SearchSettings,
    ToolframeSettings,
)
from toolframe.observability import MemoryRenderer, get_logger
from toolframe.tools import ReadFilesParams, ThinkParams, parse_request


@pytest.fixture
def settings() -> ToolframeSettings:
    return ToolframeSettings(
        logging=LoggingSettings(format="none"),
        chunking=ChunkingSettings(max_chunk_size=1000),
        search=SearchSettings(api_key="tvly-test", endpoint="https://search.test/search"),
    )


@pytest.fixture
def system(settings: ToolframeSettings, logs: MemoryRenderer, runner: FakeCommandRunner, mcp_client: FakeMcpClient) -> ToolSystem:
    transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"answer": "yes", "results": []}))
    return create_tool_system(
        settings,
        logger=get_logger("toolframe.tests.system", renderer=logs),
        http=httpx.AsyncClient(transport=transport),
        command_runner=runner,
        mcp_client=mcp_client,
        configure=False,
    )


def test_registers_every_builtin(system: ToolSystem) -> None:
    assert len(system.registry) == 12
    assert system.deps.chunks.max_chunk_size == 1000
    assert system.deps.config.get_nested("tavily_search.api_key") == "tvly-test"
    assert repr(system) == "ToolSystem(tools=12)"


@pytest.mark.asyncio
async def test_read_through_registry(system: ToolSystem, tmp_path: Path) -> None:
    target = tmp_path / "notes.txt"
    target.write_text("alpha\nbeta\ngamma\n")
    out = await system.execute({"type": "readFiles", "paths": [str(target)], "options": {"lines": {"from": 2}}})
    assert out.endswith("beta\ngamma\n")
    assert out.split("\n", 1)[0] == f"File: {target} (lines 2 to 4)"


@pytest.mark.asyncio
async def test_invoke_and_render(system: ToolSystem) -> None:
    outcome = await system.invoke({"type": "think", "thought": "outline"})
    assert outcome.is_ok()
    rendered = orjson.loads(system.render(outcome))
    assert rendered["result"] == {"reasoning": "outline"}


@pytest.mark.asyncio
async def test_invoke_text_renders_failures(system: ToolSystem) -> None:
    body = orjson.loads(await system.invoke_text({"type": "frobnicate"}))
    assert body == {"success": False, "error": "Tool not found: frobnicate", "type": "NOT_FOUND", "tool_name": "frobnicate"}


@pytest.mark.asyncio
async def test_string_mode_failure_is_unwrapped_by_invoke(system: ToolSystem) -> None:
    outcome = await system.invoke({"type": "readFiles", "paths": ["/definitely/not/here"]})
    assert outcome.unwrap_err().kind is ErrorKind.EXECUTION
    with pytest.raises(ToolResponseError):
        await system.execute({"type": "readFiles", "paths": ["/definitely/not/here"]})


@pytest.mark.asyncio
async def test_search_uses_injected_client(system: ToolSystem) -> None:
    result = await system.execute({"type": "tavilySearch", "query": "is it up"})
    assert result.result["answer"] == "yes"


@pytest.mark.asyncio
async def test_command_and_bridge(system: ToolSystem, runner: FakeCommandRunner, mcp_client: FakeMcpClient) -> None:
    await system.execute({"type": "executeCommand", "command": "pwd", "cwd": "/"})
    assert runner.calls == [("execute", "pwd", "/")]
    await system.execute({"type": "mcp_docs", "topic": "x"})
    assert mcp_client.calls == [("docs", {"topic": "x"})]


@pytest.mark.asyncio
async def test_custom_bridge_prefix(logs: MemoryRenderer, mcp_client: FakeMcpClient) -> None:
    settings = ToolframeSettings(logging=LoggingSettings(format="none"), bridge=BridgeSettings(prefix="remote_"))
    async with create_tool_system(
        settings, logger=get_logger(renderer=logs), mcp_client=mcp_client, configure=False,
    ) as system:
        await system.execute({"type": "remote_docs"})
    assert mcp_client.calls == [("docs", {})]


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open(system: ToolSystem) -> None:
    await system.aclose()
    assert not system.deps.http.is_closed


@pytest.mark.asyncio
async def test_owned_client_is_closed(settings: ToolframeSettings, logs: MemoryRenderer) -> None:
    system = create_tool_system(settings, logger=get_logger(renderer=logs), configure=False)
    await system.aclose()
    assert system.deps.http.is_closed


# ─────────────────────────────────────────────────────────────────────────────
# parse_request
# ─────────────────────────────────────────────────────────────────────────────


def test_parse_request_selects_model() -> None:
    assert isinstance(parse_request({"type": "think", "thought": "x"}), ThinkParams)
    req = parse_request({"type": "readFiles", "paths": ["a"], "options": {"lines": {"from": 1, "to": 2}}})
    assert isinstance(req, ReadFilesParams)
    assert req.options.lines.to == 2


def test_parse_request_rejects_unknown_type() -> None:
    with pytest.raises(pydantic.ValidationError):
        parse_request({"type": "mcp_search"})
