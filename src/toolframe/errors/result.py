"""Ok/Err outcome of a tool invocation.

Boundary callers that prefer values over exceptions receive a ToolOutcome:
either the capability's result or the classified ToolError. Serializing an
outcome to plain text happens in exactly one place, ``render_outcome``.

Examples:
    >>> Ok("done").map(str.upper).unwrap()
    'DONE'
    >>> Err("fail").unwrap_or("fallback")
    'fallback'
    >>> match outcome:
    ...     case Ok(value): print(value)
    ...     case Err(error): print(error.kind)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar, Union

import orjson
from pydantic import BaseModel

if TYPE_CHECKING:
    from .errors import ToolError

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """The invocation produced ``value``."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> Any:
        raise RuntimeError(f"unwrap_err() on {self!r}")

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def match(self, *, ok: Callable[[T], U], err: Callable[[Any], U]) -> U:
        return ok(self.value)

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """The invocation failed with ``error``."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise RuntimeError(f"unwrap() on {self!r}")

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[Any], Any]) -> Err[E]:
        return self

    def match(self, *, ok: Callable[[Any], U], err: Callable[[E], U]) -> U:
        return err(self.error)

    def __bool__(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]
ToolOutcome = Union[Ok[Any], "Err[ToolError]"]


def render_outcome(outcome: ToolOutcome) -> str:
    """Serialize an outcome to the plain-text result channel.

    Strings pass through, pydantic models and other values become JSON, and
    failures become the JSON error envelope.
    """
    match outcome:
        case Err(error):
            return error.to_response()
        case Ok(str() as text):
            return text
        case Ok(BaseModel() as model):
            return model.model_dump_json()
        case Ok(value):
            return orjson.dumps(value, default=str).decode()
    raise TypeError(f"Not an outcome: {outcome!r}")
