"""Observability for tool execution: structured logging.

Quick Start:
    >>> from toolframe.observability import configure_logging, get_logger
    >>> configure_logging(format="json", level="DEBUG")
    >>> log = get_logger("toolframe.registry")
    >>> log.info("Tool registered", tool_name="think")
"""

from .logging import (
    VERBOSE,
    BoundLogger,
    ConsoleRenderer,
    JsonRenderer,
    LogEntry,
    LogRenderer,
    MemoryRenderer,
    NoOpRenderer,
    ToolLogger,
    configure_logging,
    get_logger,
    log_context,
    parse_level,
    redact,
)

__all__ = [
    "VERBOSE",
    "BoundLogger",
    "ConsoleRenderer",
    "JsonRenderer",
    "LogEntry",
    "LogRenderer",
    "MemoryRenderer",
    "NoOpRenderer",
    "ToolLogger",
    "configure_logging",
    "get_logger",
    "log_context",
    "parse_level",
    "redact",
]
