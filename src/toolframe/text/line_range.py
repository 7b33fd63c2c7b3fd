"""1-based inclusive line windows over newline-delimited text.

A range is either a LineRange model or a mapping with optional ``from`` and
``to`` keys. Omitted ``from`` means line 1, omitted ``to`` means the last
line, and an out-of-range ``to`` is clamped silently; only
``validate_line_range`` reports contradictions.

Example:
    >>> filter_by_line_range("a\\nb\\nc\\nd", {"from": 2, "to": 3})
    'b\\nc'
    >>> describe_line_range(100, {"from": 10})
    ' (lines 10 to 100)'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


class LineRange(BaseModel):
    """Inclusive line window; ``from`` is a keyword so the field is ``from_``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: int | None = Field(default=None, alias="from")
    to: int | None = None


LineRangeLike = Union[LineRange, Mapping[str, Any]]


def _bounds(line_range: LineRangeLike) -> tuple[Any, Any]:
    if isinstance(line_range, LineRange):
        return line_range.from_, line_range.to
    return line_range.get("from", line_range.get("from_")), line_range.get("to")


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def filter_by_line_range(content: str, line_range: LineRangeLike | None = None) -> str:
    """Return lines ``from..to`` of content, rejoined with newlines.

    Identity when no range is given.
    """
    if line_range is None:
        return content
    lines = content.split("\n")
    start, end = _bounds(line_range)
    start = max(1, start if start is not None else 1)
    end = min(len(lines), end if end is not None else len(lines))
    return "\n".join(lines[start - 1:end])


def describe_line_range(total_lines: int, line_range: LineRangeLike | None = None) -> str:
    """Render ``" (lines {from} to {to})"``, or "" when no range is given."""
    if line_range is None:
        return ""
    start, end = _bounds(line_range)
    start = start if start is not None else 1
    end = min(end if end is not None else total_lines, total_lines)
    return f" (lines {start} to {end})"


def validate_line_range(line_range: LineRangeLike | None = None) -> list[str]:
    """Human-readable violations; an empty list means the range is valid."""
    if line_range is None:
        return []
    start, end = _bounds(line_range)
    errors: list[str] = []
    if start is not None and not _is_positive_int(start):
        errors.append('Line range "from" must be a positive integer')
    if end is not None and not _is_positive_int(end):
        errors.append('Line range "to" must be a positive integer')
    if _is_positive_int(start) and _is_positive_int(end) and start > end:
        errors.append('Line range "from" must be less than or equal to "to"')
    return errors
