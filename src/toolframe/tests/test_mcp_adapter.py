"""Tests for the MCP bridge adapter."""

from __future__ import annotations

import orjson
import pytest
from conftest import FakeMcpClient

from toolframe.core import ToolDependencies
from toolframe.errors import ExecutionError, ToolResponseError
from toolframe.foundation.config import ConfigStore
from toolframe.observability import MemoryRenderer, get_logger
from toolframe.tools.mcp import McpCallResult, McpToolAdapter, McpToolParams, sanitize_arguments


def adapter_with(client: FakeMcpClient | None, logs: MemoryRenderer, **config: object) -> McpToolAdapter:
    deps = ToolDependencies.create(
        logger=get_logger("toolframe.tests.mcp", renderer=logs, level="DEBUG"),
        config=ConfigStore(config),
        mcp_client=client,
    )
    return McpToolAdapter(deps)


class TestMcpToolAdapter:
    @pytest.mark.asyncio
    async def test_forwards_rewritten_request(self, logs: MemoryRenderer) -> None:
        client = FakeMcpClient()
        result = await adapter_with(client, logs).execute(
            {"type": "mcp", "mcp_tool_name": "search", "query": "asyncio", "limit": 2},
        )
        assert client.calls == [("search", {"query": "asyncio", "limit": 2})]
        assert result.success
        assert result.result == {"hits": 3}
        assert result.message == "Executed MCP tool: search"

    @pytest.mark.asyncio
    async def test_direct_prefixed_type(self, logs: MemoryRenderer) -> None:
        client = FakeMcpClient()
        await adapter_with(client, logs).execute({"type": "mcp_lookup", "id": 1})
        assert client.calls == [("lookup", {"id": 1})]

    @pytest.mark.asyncio
    async def test_configured_prefix(self, logs: MemoryRenderer) -> None:
        client = FakeMcpClient()
        await adapter_with(client, logs, bridge={"prefix": "ext_"}).execute({"type": "ext_lookup"})
        assert client.calls == [("lookup", {})]

    @pytest.mark.asyncio
    async def test_remote_message_is_kept(self, logs: MemoryRenderer) -> None:
        client = FakeMcpClient(McpCallResult(message="3 results", result=[1, 2, 3]))
        result = await adapter_with(client, logs).execute({"type": "mcp_search"})
        assert result.message == "3 results"

    @pytest.mark.asyncio
    async def test_missing_tool_name(self, logs: MemoryRenderer) -> None:
        client = FakeMcpClient()
        with pytest.raises(ToolResponseError) as exc:
            await adapter_with(client, logs).execute({"type": "mcp"})
        assert "MCP tool name is required" in exc.value.error.message
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_no_client(self, logs: MemoryRenderer) -> None:
        with pytest.raises(ToolResponseError) as exc:
            await adapter_with(None, logs).execute({"type": "mcp_search"})
        assert exc.value.error.message == "No MCP client configured"

    @pytest.mark.asyncio
    async def test_tool_not_found(self, logs: MemoryRenderer) -> None:
        client = FakeMcpClient(McpCallResult(found=False, success=False))
        with pytest.raises(ToolResponseError) as exc:
            await adapter_with(client, logs).execute({"type": "mcp_ghost"})
        body = orjson.loads(str(exc.value))
        assert body["type"] == "EXECUTION"
        assert body["error"].startswith("MCP tool not found: ghost.")
        assert body["mcp_tool_name"] == "ghost"

    @pytest.mark.asyncio
    async def test_remote_failure(self, logs: MemoryRenderer) -> None:
        client = FakeMcpClient(McpCallResult(success=False, error="quota exhausted"))
        with pytest.raises(ToolResponseError) as exc:
            await adapter_with(client, logs).execute({"type": "mcp_search", "q": "x"})
        assert exc.value.error.message == "quota exhausted"
        assert exc.value.error.metadata["args"] == {"q": "x"}

    @pytest.mark.asyncio
    async def test_client_exception_is_wrapped(self, logs: MemoryRenderer) -> None:
        client = FakeMcpClient(error=ConnectionResetError("socket closed"))
        with pytest.raises(ToolResponseError) as exc:
            await adapter_with(client, logs).execute({"type": "mcp_search", "api_key": "sk-123"})
        err = exc.value.error
        assert isinstance(err, ExecutionError)
        assert err.message == "Error executing MCP tool search: socket closed"
        failure = logs.find("Error executing MCP tool: search")[0]
        assert failure.context["args"] == {"api_key": "[REDACTED]"}

    @pytest.mark.asyncio
    async def test_start_log_redacts_secrets(self, logs: MemoryRenderer) -> None:
        await adapter_with(FakeMcpClient(), logs).execute({"type": "mcp_login", "password": "hunter2", "user": "ada"})
        logged = orjson.loads(logs.find("Executing mcp")[0].context["input"])
        assert logged == {"type": "mcp_login", "mcp_tool_name": None, "args": {"password": "[REDACTED]", "user": "ada"}}


def test_params_collect_extra_fields_as_arguments() -> None:
    params = McpToolParams.model_validate({"type": "mcp", "mcp_tool_name": "t", "a": 1, "b": {"c": 2}})
    assert params.arguments == {"a": 1, "b": {"c": 2}}


def test_sanitize_arguments_recurses() -> None:
    cleaned = sanitize_arguments({"outer": {"Secret_Value": "x", "note": "n" * 150}, "n": 1})
    assert cleaned == {"outer": {"Secret_Value": "[REDACTED]", "note": "n" * 100 + "..."}, "n": 1}
