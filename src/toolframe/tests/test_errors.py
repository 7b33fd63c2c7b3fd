"""Tests for the error taxonomy and the Ok/Err outcome.

Validates:
- Every error carries its kind and tool_name
- JSON envelope shape
- wrap_error normalization rules
- render_outcome serialization
"""

from __future__ import annotations

import orjson
import pytest

from toolframe.errors import (
    ChunkIndexOutOfRangeError,
    Err,
    ErrorKind,
    ExecutionError,
    NetworkError,
    Ok,
    PermissionDeniedError,
    RateLimitError,
    ToolError,
    ToolNotFoundError,
    ToolResponseError,
    ValidationError,
    ValidationResult,
    error_kind_of,
    is_network_error,
    is_not_found_error,
    is_tool_error,
    render_outcome,
    wrap_error,
)


# ═════════════════════════════════════════════════════════════════════════════
# Taxonomy
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    ("error", "kind"),
    [
        (ValidationError("bad", "readFiles"), ErrorKind.VALIDATION),
        (ExecutionError("boom", "readFiles"), ErrorKind.EXECUTION),
        (ToolNotFoundError("nope"), ErrorKind.NOT_FOUND),
        (PermissionDeniedError("denied", "executeCommand", "rm"), ErrorKind.PERMISSION_DENIED),
        (RateLimitError("slow down", "tavilySearch"), ErrorKind.RATE_LIMIT),
        (NetworkError("offline", "fetchWebsite", "https://x.dev", 503), ErrorKind.NETWORK),
        (ChunkIndexOutOfRangeError(9, 3), ErrorKind.VALIDATION),
    ],
)
def test_kinds_and_tool_name(error: ToolError, kind: ErrorKind) -> None:
    assert error.kind is kind
    assert "tool_name" in error.metadata


def test_tool_name_defaults_to_unknown() -> None:
    assert ToolError("x").tool_name == "unknown"


def test_not_found_message_and_metadata() -> None:
    err = ToolNotFoundError("frobnicate")
    assert err.message == "Tool not found: frobnicate"
    assert err.metadata["tool_name"] == "frobnicate"


def test_chunk_range_message() -> None:
    err = ChunkIndexOutOfRangeError(0, 4)
    assert err.message == "Chunk index 0 is out of range. Valid range: 1 to 4"
    assert err.metadata["requested_index"] == 0
    assert err.metadata["total_chunks"] == 4


def test_retryable_kinds() -> None:
    assert RateLimitError("x", "t").is_retryable
    assert NetworkError("x", "t").is_retryable
    assert not ExecutionError("x", "t").is_retryable


def test_execution_error_keeps_cause() -> None:
    cause = OSError("disk full")
    err = ExecutionError("write failed", "writeToFile", cause, path="/tmp/a")
    assert err.__cause__ is cause
    assert err.metadata["path"] == "/tmp/a"
    assert err.metadata["cause"] is cause


# ═════════════════════════════════════════════════════════════════════════════
# Serialization
# ═════════════════════════════════════════════════════════════════════════════


def test_to_response_envelope() -> None:
    err = NetworkError("HTTP 503", "fetchWebsite", "https://x.dev", 503)
    body = orjson.loads(err.to_response())
    assert body == {
        "success": False,
        "error": "HTTP 503",
        "type": "NETWORK",
        "tool_name": "fetchWebsite",
        "url": "https://x.dev",
        "status_code": 503,
    }


def test_to_response_coerces_unserializable_metadata() -> None:
    err = ExecutionError("boom", "t", ValueError("inner"))
    body = orjson.loads(err.to_response())
    assert body["cause"] == "inner"


def test_to_record() -> None:
    try:
        raise ValidationError("bad input", "think", {"thought": ""})
    except ValidationError as e:
        record = e.to_record()
        as_dict = e.to_dict()
    assert record.name == "ValidationError"
    assert record.kind == "VALIDATION"
    assert record.metadata["input"] == {"thought": ""}
    assert record.traceback and "ValidationError" in record.traceback
    assert as_dict["message"] == "bad input"


def test_response_error_carries_typed_error() -> None:
    err = PermissionDeniedError("Command not allowed: rm", "executeCommand", "rm")
    wrapped = ToolResponseError(err)
    assert wrapped.error is err
    assert orjson.loads(str(wrapped))["type"] == "PERMISSION_DENIED"


# ═════════════════════════════════════════════════════════════════════════════
# wrap_error
# ═════════════════════════════════════════════════════════════════════════════


def test_wrap_error_is_idempotent() -> None:
    err = ExecutionError("boom", "t")
    assert wrap_error(err, "other") is err
    assert wrap_error(ToolResponseError(err), "other") is err


def test_wrap_error_throttling_name() -> None:
    class ThrottlingException(Exception):
        pass

    err = wrap_error(ThrottlingException("rate exceeded"), "tavilySearch")
    assert isinstance(err, RateLimitError)
    assert err.tool_name == "tavilySearch"


def test_wrap_error_plain_exception() -> None:
    cause = KeyError("k")
    err = wrap_error(cause, "readFiles")
    assert isinstance(err, ExecutionError)
    assert err.metadata["cause"] is cause


def test_wrap_error_non_exception() -> None:
    err = wrap_error({"weird": True}, "t")
    assert err.kind is ErrorKind.EXECUTION
    assert err.message == "Unknown error occurred"
    assert err.metadata["original_error"] == {"weird": True}
    assert wrap_error("just text", "t").message == "just text"


def test_guards_and_kind_of() -> None:
    err = NetworkError("x", "t")
    assert is_tool_error(err) and is_network_error(err)
    assert not is_not_found_error(err)
    assert error_kind_of(err) == "NETWORK"
    assert error_kind_of(ToolResponseError(err)) == "NETWORK"
    assert error_kind_of(ValueError()) == "ValueError"


# ═════════════════════════════════════════════════════════════════════════════
# Outcome
# ═════════════════════════════════════════════════════════════════════════════


def test_validation_result() -> None:
    assert ValidationResult.ok().is_valid
    invalid = ValidationResult.from_errors(["a", "b"])
    assert not invalid.is_valid
    assert list(invalid.errors) == ["a", "b"]


def test_ok_err_basics() -> None:
    assert Ok(2).map(lambda x: x * 3).unwrap() == 6
    assert Err("fail").unwrap_or(0) == 0
    assert Ok(1) == Ok(1)
    assert Ok(1) != Err(1)
    assert not Err("x")
    with pytest.raises(RuntimeError):
        Ok(1).unwrap_err()
    assert Ok(5).match(ok=lambda v: v + 1, err=lambda e: -1) == 6


def test_render_outcome() -> None:
    assert render_outcome(Ok("plain")) == "plain"
    assert orjson.loads(render_outcome(Ok({"a": 1}))) == {"a": 1}
    body = orjson.loads(render_outcome(Err(ToolNotFoundError("nope"))))
    assert body["success"] is False
    assert body["type"] == "NOT_FOUND"
