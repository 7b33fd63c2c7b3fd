"""Shell command execution behind a small protocol.

SubprocessCommandRunner runs commands through asyncio subprocesses. A command
that is still running when the timeout elapses is kept alive so the caller
can feed it stdin by pid; its output so far is returned with
``requires_input`` set.
"""

from __future__ import annotations

import asyncio
import fnmatch
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


class CommandNotAllowedError(PermissionError):
    """Command rejected by the allow-list."""


@dataclass(slots=True, frozen=True)
class CommandOutput:
    stdout: str
    stderr: str
    exit_code: int | None
    pid: int | None = None
    requires_input: bool = False

    def to_dict(self) -> dict[str, object]:
        return {
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "pid": self.pid,
            "requires_input": self.requires_input,
        }


@runtime_checkable
class CommandRunner(Protocol):
    """Runs shell commands and feeds input to ones still waiting."""

    async def execute(self, command: str, cwd: str) -> CommandOutput: ...
    async def send_input(self, pid: int, stdin: str) -> CommandOutput: ...


@dataclass(slots=True)
class _Session:
    process: asyncio.subprocess.Process
    stdout: list[str] = field(default_factory=list)
    stderr: list[str] = field(default_factory=list)
    readers: list[asyncio.Task[None]] = field(default_factory=list)


async def _pump(stream: asyncio.StreamReader | None, sink: list[str]) -> None:
    if stream is None:
        return
    async for line in stream:
        sink.append(line.decode("utf-8", errors="replace"))


class SubprocessCommandRunner:
    """CommandRunner backed by ``asyncio.create_subprocess_shell``.

    Args:
        shell: Shell executable; platform default when None
        timeout: Seconds to wait before reporting a command as waiting for input
        allowed_commands: fnmatch patterns; empty permits every command
        max_output: Characters of stdout/stderr kept per call (tail is kept)
    """

    __slots__ = ("_shell", "_timeout", "_allowed", "_max_output", "_sessions")

    def __init__(
        self,
        *,
        shell: str | None = None,
        timeout: float = 60.0,
        allowed_commands: Iterable[str] = (),
        max_output: int = 50_000,
    ) -> None:
        self._shell = shell
        self._timeout = timeout
        self._allowed = tuple(allowed_commands)
        self._max_output = max_output
        self._sessions: dict[int, _Session] = {}

    def is_allowed(self, command: str) -> bool:
        if not self._allowed:
            return True
        stripped = command.strip()
        program = stripped.split(maxsplit=1)[0] if stripped else ""
        return any(fnmatch.fnmatchcase(stripped, p) or fnmatch.fnmatchcase(program, p) for p in self._allowed)

    async def execute(self, command: str, cwd: str) -> CommandOutput:
        if not self.is_allowed(command):
            raise CommandNotAllowedError(f"Command not allowed: {command}")
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=cwd,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            executable=self._shell,
        )
        session = _Session(process)
        session.readers = [
            asyncio.create_task(_pump(process.stdout, session.stdout)),
            asyncio.create_task(_pump(process.stderr, session.stderr)),
        ]
        return await self._settle(session)

    async def send_input(self, pid: int, stdin: str) -> CommandOutput:
        session = self._sessions.get(pid)
        if session is None or session.process.stdin is None:
            raise ProcessLookupError(f"No running process with pid {pid}")
        data = stdin if stdin.endswith("\n") else f"{stdin}\n"
        session.process.stdin.write(data.encode())
        await session.process.stdin.drain()
        return await self._settle(session)

    async def _settle(self, session: _Session) -> CommandOutput:
        pid = session.process.pid
        try:
            await asyncio.wait_for(session.process.wait(), self._timeout)
        except TimeoutError:
            self._sessions[pid] = session
            return self._take_output(session, None, requires_input=True)
        await asyncio.gather(*session.readers)
        self._sessions.pop(pid, None)
        return self._take_output(session, session.process.returncode)

    def _take_output(self, session: _Session, exit_code: int | None, *, requires_input: bool = False) -> CommandOutput:
        stdout, stderr = "".join(session.stdout), "".join(session.stderr)
        session.stdout.clear()
        session.stderr.clear()
        return CommandOutput(
            stdout=stdout[-self._max_output:],
            stderr=stderr[-self._max_output:],
            exit_code=exit_code,
            pid=session.process.pid,
            requires_input=requires_input,
        )

    @property
    def running(self) -> list[int]:
        return sorted(self._sessions)

    async def aclose(self) -> None:
        """Kill every process still waiting for input."""
        sessions, self._sessions = list(self._sessions.values()), {}
        for session in sessions:
            if session.process.returncode is None:
                session.process.kill()
                await session.process.wait()
            for reader in session.readers:
                reader.cancel()
