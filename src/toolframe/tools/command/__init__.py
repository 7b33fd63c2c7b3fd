"""Command execution tool and its runner."""

from .execute import ExecuteCommandParams, ExecuteCommandTool
from .runner import CommandNotAllowedError, CommandOutput, CommandRunner, SubprocessCommandRunner

__all__ = [
    "CommandNotAllowedError",
    "CommandOutput",
    "CommandRunner",
    "ExecuteCommandParams",
    "ExecuteCommandTool",
    "SubprocessCommandRunner",
]
