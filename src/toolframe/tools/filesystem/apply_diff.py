"""In-place text replacement inside a file."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, Field

from ...core import BaseTool, ToolCategory, ToolMetadata, ToolParams, ToolResult
from ...errors import ExecutionError


class ApplyDiffEditParams(ToolParams):
    type: Literal["applyDiffEdit"] = "applyDiffEdit"
    path: str = Field(..., min_length=1, description="File to edit")
    original_text: str = Field(..., min_length=1, description="Exact text to replace")
    updated_text: str = Field(..., description="Replacement text")


class TextNotFoundError(Exception):
    """Original text does not occur in the file."""


def _replace_first(path: Path, original: str, updated: str) -> None:
    content = path.read_text(encoding="utf-8")
    if original not in content:
        raise TextNotFoundError("Original text not found in file")
    path.write_text(content.replace(original, updated, 1), encoding="utf-8")


class ApplyDiffEditTool(BaseTool[ApplyDiffEditParams]):
    """Replace the first occurrence of ``original_text`` with ``updated_text``."""

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="applyDiffEdit",
        description="Apply a diff edit to a file by replacing original text with updated text",
        category=ToolCategory.FILESYSTEM,
    )
    params_schema: ClassVar[type[ApplyDiffEditParams]] = ApplyDiffEditParams

    async def run(self, params: ApplyDiffEditParams) -> ToolResult:
        self.logger.debug(
            f"Applying diff edit to file: {params.path}",
            tool=self.name,
            original_text_length=len(params.original_text),
            updated_text_length=len(params.updated_text),
        )
        try:
            await asyncio.to_thread(_replace_first, Path(params.path), params.original_text, params.updated_text)
        except TextNotFoundError as e:
            self.logger.warning(f"Original text not found in file: {params.path}", tool=self.name)
            raise ExecutionError(str(e), self.name, path=params.path) from e
        except (OSError, UnicodeDecodeError) as e:
            raise ExecutionError(f"Error applying diff edit: {e}", self.name, e, path=params.path) from e

        self.logger.info(f"Successfully applied diff edit to file: {params.path}", tool=self.name)
        return self.success_result(
            "Successfully applied diff edit",
            {"path": params.path, "original_text": params.original_text, "updated_text": params.updated_text},
        )

    def sanitize_input_for_logging(self, request: BaseModel | Mapping[str, Any]) -> str:
        return self.truncated_projection(request, original_text=100, updated_text=100)
