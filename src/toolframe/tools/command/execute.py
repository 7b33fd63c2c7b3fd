"""executeCommand: run a shell command, or feed stdin to one still running."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, Field

from ...core import BaseTool, ToolCategory, ToolMetadata, ToolParams, ToolResult
from ...errors import ExecutionError, PermissionDeniedError
from .runner import CommandNotAllowedError, CommandRunner


class ExecuteCommandParams(ToolParams):
    type: Literal["executeCommand"] = "executeCommand"
    command: str | None = Field(default=None, description="Shell command to run")
    cwd: str | None = Field(default=None, description="Working directory for the command")
    pid: int | None = Field(default=None, description="Process waiting for input")
    stdin: str | None = Field(default=None, description="Input to send to the process")

    @property
    def is_stdin(self) -> bool:
        return self.pid is not None and self.stdin is not None


class ExecuteCommandTool(BaseTool[ExecuteCommandParams]):
    """Execute system commands through the injected CommandRunner."""

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="executeCommand",
        description="Execute system commands with proper permission controls",
        category=ToolCategory.COMMAND,
    )
    params_schema: ClassVar[type[ExecuteCommandParams]] = ExecuteCommandParams

    def check(self, params: ExecuteCommandParams) -> list[str]:
        if params.is_stdin:
            return []
        if params.command is None and params.cwd is None:
            return ["Invalid input format: requires either (command, cwd) or (pid, stdin)"]
        errors: list[str] = []
        if not (params.command or "").strip():
            errors.append("Command is required")
        if not (params.cwd or "").strip():
            errors.append("Working directory (cwd) is required")
        return errors

    @property
    def runner(self) -> CommandRunner:
        if self.deps.command_runner is None:
            raise ExecutionError("Command runner not configured", self.name)
        return self.deps.command_runner

    async def run(self, params: ExecuteCommandParams) -> ToolResult:
        runner = self.runner
        operation = "stdin" if params.is_stdin else params.command
        try:
            if params.is_stdin:
                self.logger.info("Sending stdin to process", tool=self.name, pid=params.pid, stdin_length=len(params.stdin or ""))
                output = await runner.send_input(params.pid, params.stdin)  # type: ignore[arg-type]
            else:
                self.logger.info("Executing new command", tool=self.name, command=params.command, cwd=params.cwd)
                output = await runner.execute(params.command, params.cwd)  # type: ignore[arg-type]
        except CommandNotAllowedError as e:
            raise PermissionDeniedError(str(e), self.name, operation) from e
        except (OSError, ValueError) as e:
            raise ExecutionError(str(e) or "Unknown error occurred", self.name, e, input=params.model_dump()) from e

        self.logger.info(
            "Command execution completed",
            tool=self.name,
            exit_code=output.exit_code,
            success=output.exit_code == 0,
            requires_input=output.requires_input,
        )
        message = f"Sent input to process {params.pid}" if params.is_stdin else f"Command executed: {params.command}"
        return self.success_result(message, output.to_dict())

    def sanitize_input_for_logging(self, request: BaseModel | Mapping[str, Any]) -> str:
        return self.truncated_projection(request, command=100, stdin=50)
