"""think: a scratchpad the model uses to reason before acting."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, Field

from ...core import BaseTool, ToolCategory, ToolMetadata, ToolParams, ToolResult


class ThinkParams(ToolParams):
    type: Literal["think"] = "think"
    thought: str = Field(..., description="Your thoughts")


class ThinkTool(BaseTool[ThinkParams]):
    """Echo the thought back as a typed result.

    Failures surface as typed ToolError rather than a JSON string.
    """

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="think",
        description=(
            "Use the tool to think about something. It will not obtain new information or make any "
            "changes to the repository, but just log the thought. Use it when complex reasoning or "
            "brainstorming is needed."
        ),
        category=ToolCategory.THINKING,
    )
    params_schema: ClassVar[type[ThinkParams]] = ThinkParams
    error_as_string: ClassVar[bool] = False

    def check(self, params: ThinkParams) -> list[str]:
        return [] if params.thought.strip() else ["Thought cannot be empty"]

    async def run(self, params: ThinkParams) -> ToolResult:
        self.logger.debug("Processing thought", tool=self.name, thought_length=len(params.thought))
        return self.success_result("Thinking process completed", {"reasoning": params.thought})

    def sanitize_input_for_logging(self, request: BaseModel | Mapping[str, Any]) -> str:
        return self.truncated_projection(request, thought=200)
