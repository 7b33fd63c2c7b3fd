"""Structured logging for tool execution with bound context.

Every capability and the registry log through a BoundLogger: key-value pairs
bound once (logger name, tool name) appear in every entry, and call-site
metadata is merged on top. Values under sensitive-looking keys are redacted
before an entry reaches its renderer.

Levels follow the stdlib numbering with one addition, VERBOSE (5), for
per-chunk and per-file detail below DEBUG.

Quick Start:
    >>> from toolframe.observability import get_logger, configure_logging
    >>>
    >>> configure_logging(format="console")  # or "json" for log shippers
    >>> log = get_logger("toolframe.registry")
    >>> log.info("Tool registered", tool_name="readFiles")
    >>>
    >>> log = log.bind(tool="readFiles")
    >>> log.verbose("chunk sealed", size=49_812)
"""

from __future__ import annotations

import logging
import re
import sys
import time
from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol, TextIO, runtime_checkable

import orjson

from toolframe.errors import JsonDict

VERBOSE = 5
logging.addLevelName(VERBOSE, "VERBOSE")

_SENSITIVE_KEY = re.compile(r"password|secret|token|api_?key|credential|auth|private", re.IGNORECASE)
_REDACTED = "[REDACTED]"


# ─────────────────────────────────────────────────────────────────────────────
# Entries & Renderers
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class LogEntry:
    """One rendered event: level name, message and merged, redacted context."""

    timestamp: float
    level: str
    event: str
    context: JsonDict

    @property
    def when(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=UTC)


@runtime_checkable
class LogRenderer(Protocol):
    def render(self, entry: LogEntry) -> None: ...


_ANSI = {"verbose": "2", "debug": "2", "info": "32", "warning": "33", "error": "31", "key": "36", "event": "1"}


@dataclass(slots=True)
class ConsoleRenderer:
    """``12:00:01.250 [info] Executing readFiles tool="readFiles" ...`` on one line."""

    output: TextIO = field(default_factory=lambda: sys.stderr)
    colors: bool | None = None

    def __post_init__(self) -> None:
        if self.colors is None:
            isatty = getattr(self.output, "isatty", None)
            self.colors = bool(isatty and isatty())

    def _paint(self, text: str, style: str) -> str:
        code = _ANSI.get(style)
        return f"\033[{code}m{text}\033[0m" if self.colors and code else text

    def render(self, entry: LogEntry) -> None:
        stamp = entry.when.strftime("%H:%M:%S.%f")[:-3]
        fields = " ".join(
            f"{self._paint(key, 'key')}={_console_value(value)}"
            for key, value in sorted(entry.context.items())
        )
        line = f"{stamp} {self._paint(f'[{entry.level}]', entry.level)} {self._paint(entry.event, 'event')}"
        print(f"{line} {fields}" if fields else line, file=self.output)


@dataclass(slots=True)
class JsonRenderer:
    """One JSON object per line."""

    output: TextIO = field(default_factory=lambda: sys.stdout)

    def render(self, entry: LogEntry) -> None:
        record = {"timestamp": entry.when.isoformat(), "level": entry.level, "event": entry.event, **entry.context}
        self.output.write(orjson.dumps(record, default=str, option=orjson.OPT_NON_STR_KEYS).decode() + "\n")


class NoOpRenderer:
    __slots__ = ()

    def render(self, entry: LogEntry) -> None:
        return None


@dataclass(slots=True)
class MemoryRenderer:
    """Keeps entries in a list; tests assert against it."""

    entries: list[LogEntry] = field(default_factory=list)

    def render(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def events(self, level: str | None = None) -> list[str]:
        return [e.event for e in self.entries if level is None or e.level == level]

    def find(self, event: str) -> list[LogEntry]:
        return [e for e in self.entries if e.event == event]

    def clear(self) -> None:
        self.entries.clear()


def _console_value(value: object) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, Mapping):
        return f"{{{len(value)} keys}}"
    if isinstance(value, (list, tuple)):
        return f"[{len(value)} items]"
    return orjson.dumps(value, default=repr).decode()


# ─────────────────────────────────────────────────────────────────────────────
# Process-wide State
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class _Sink:
    renderer: LogRenderer | None
    level: int


_sink: ContextVar[_Sink] = ContextVar("toolframe_log_sink", default=_Sink(None, logging.INFO))
_scope: ContextVar[JsonDict] = ContextVar("toolframe_log_scope", default={})


def _active_renderer() -> LogRenderer:
    current = _sink.get()
    if current.renderer is None:
        current = _Sink(ConsoleRenderer(), current.level)
        _sink.set(current)
    return current.renderer  # type: ignore[return-value]


def parse_level(level: str | int) -> int:
    """Numeric value of a level name; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    name = {"WARN": "WARNING"}.get(level.upper(), level.upper())
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def redact(data: Mapping[str, Any]) -> JsonDict:
    """Copy of data with sensitive-looking keys masked, recursing into mappings and lists."""
    def scrub(value: Any) -> Any:
        if isinstance(value, Mapping):
            return redact(value)
        if isinstance(value, list):
            return [scrub(v) for v in value]
        return value

    return {
        key: _REDACTED if isinstance(key, str) and _SENSITIVE_KEY.search(key) else scrub(value)
        for key, value in data.items()
    }


class log_context:
    """Scope extra key-value pairs onto every entry logged inside the block.

    Example:
        >>> with log_context(request_id="abc123"):
        ...     log.info("processing")  # includes request_id
    """

    __slots__ = ("_extra", "_token")

    def __init__(self, **kw: Any) -> None:
        self._extra = kw
        self._token = None

    def __enter__(self) -> log_context:
        self._token = _scope.set({**_scope.get(), **self._extra})
        return self

    def __exit__(self, *_: object) -> None:
        if self._token is not None:
            _scope.reset(self._token)
            self._token = None


# ─────────────────────────────────────────────────────────────────────────────
# Loggers
# ─────────────────────────────────────────────────────────────────────────────


@runtime_checkable
class ToolLogger(Protocol):
    """Logger interface handed to capabilities."""

    def debug(self, event: str, **kw: Any) -> None: ...
    def info(self, event: str, **kw: Any) -> None: ...
    def warning(self, event: str, **kw: Any) -> None: ...
    def warn(self, event: str, **kw: Any) -> None: ...
    def error(self, event: str, **kw: Any) -> None: ...
    def verbose(self, event: str, **kw: Any) -> None: ...


class BoundLogger:
    """ToolLogger carrying bound context and an optional fixed renderer and level.

    Loggers are immutable; ``bind``/``unbind`` return new ones. Without a
    fixed renderer or level the process-wide ones from ``configure_logging``
    apply at the time of each call.
    """

    __slots__ = ("context", "_renderer", "_level")

    def __init__(
        self,
        context: Mapping[str, Any] | None = None,
        renderer: LogRenderer | None = None,
        level: int | None = None,
    ) -> None:
        self.context: JsonDict = dict(context or {})
        self._renderer = renderer
        self._level = level

    def bind(self, **kw: Any) -> BoundLogger:
        return BoundLogger({**self.context, **kw}, self._renderer, self._level)

    def unbind(self, *keys: str) -> BoundLogger:
        return BoundLogger({k: v for k, v in self.context.items() if k not in keys}, self._renderer, self._level)

    @property
    def level(self) -> int:
        return self._level if self._level is not None else _sink.get().level

    def log(self, level: int, event: str, **kw: Any) -> None:
        if level < self.level:
            return
        entry = LogEntry(
            timestamp=time.time(),
            level=logging.getLevelName(level).lower(),
            event=event,
            context=redact({**_scope.get(), **self.context, **kw}),
        )
        (self._renderer or _active_renderer()).render(entry)

    def verbose(self, event: str, **kw: Any) -> None:
        self.log(VERBOSE, event, **kw)

    def debug(self, event: str, **kw: Any) -> None:
        self.log(logging.DEBUG, event, **kw)

    def info(self, event: str, **kw: Any) -> None:
        self.log(logging.INFO, event, **kw)

    def warning(self, event: str, **kw: Any) -> None:
        self.log(logging.WARNING, event, **kw)

    warn = warning

    def error(self, event: str, **kw: Any) -> None:
        self.log(logging.ERROR, event, **kw)

    def __repr__(self) -> str:
        return f"BoundLogger(context={self.context!r}, level={logging.getLevelName(self.level)})"


def configure_logging(
    format: str = "console",  # noqa: A002
    level: str | int = "INFO",
    *,
    output: TextIO | None = None,
    colors: bool | None = None,
) -> LogRenderer:
    """Install the process-wide renderer and minimum level.

    Args:
        format: "console" (stderr), "json" (stdout, one object per line) or "none"
        level: VERBOSE, DEBUG, INFO, WARNING or ERROR
        output: Stream override for console and json
        colors: Force ANSI colors on or off; auto-detected from the stream otherwise
    """
    renderers = {
        "console": lambda: ConsoleRenderer(output=output or sys.stderr, colors=colors),
        "json": lambda: JsonRenderer(output=output or sys.stdout),
        "none": NoOpRenderer,
    }
    if format not in renderers:
        raise ValueError(f"Unknown log format {format!r}; expected one of {sorted(renderers)}")
    renderer: LogRenderer = renderers[format]()
    _sink.set(_Sink(renderer, parse_level(level)))
    return renderer


def get_logger(
    name: str | None = None,
    *,
    renderer: LogRenderer | None = None,
    level: str | int | None = None,
    **initial_context: Any,
) -> BoundLogger:
    """Logger with ``logger=<name>`` and any initial context bound.

    ``renderer`` and ``level`` pin the logger regardless of global configuration.
    """
    context = {"logger": name, **initial_context} if name else dict(initial_context)
    return BoundLogger(context, renderer, parse_level(level) if level is not None else None)
