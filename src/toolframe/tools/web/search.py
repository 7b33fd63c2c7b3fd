"""tavilySearch: web search through the Tavily API."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field

from ...core import BaseTool, ToolCategory, ToolMetadata, ToolParams, ToolResult
from ...errors import ExecutionError, NetworkError, RateLimitError
from .client import http_client

TAVILY_ENDPOINT = "https://api.tavily.com/search"


class TavilySearchOption(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    include_raw_content: bool = Field(default=False, description="Include raw page content in results")


class TavilySearchParams(ToolParams):
    type: Literal["tavilySearch"] = "tavilySearch"
    query: str = Field(..., description="The search query")
    option: TavilySearchOption = Field(default_factory=TavilySearchOption)


class TavilySearchTool(BaseTool[TavilySearchParams]):
    """Search the web for current information. Always cite sources and provide URLs."""

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="tavilySearch",
        description=(
            "Perform a web search using Tavily API to get up-to-date information or additional context. "
            "Use this when you need current information or feel a search could provide a better answer."
        ),
        category=ToolCategory.WEB,
    )
    params_schema: ClassVar[type[TavilySearchParams]] = TavilySearchParams

    def check(self, params: TavilySearchParams) -> list[str]:
        return [] if params.query.strip() else ["Query cannot be empty"]

    async def run(self, params: TavilySearchParams) -> ToolResult:
        query = params.query
        api_key = self.get_config("tavily_search.api_key")
        if not api_key:
            raise ExecutionError("Tavily API key not configured", self.name, query=query)
        endpoint = self.get_config("tavily_search.endpoint", TAVILY_ENDPOINT)
        payload = {
            "api_key": api_key,
            "query": query,
            "search_depth": "advanced",
            "include_answer": True,
            "include_images": True,
            "include_raw_content": params.option.include_raw_content,
            "max_results": self.get_config("tavily_search.max_results", 5),
            "include_domains": [],
            "exclude_domains": [],
        }

        self.logger.verbose("Sending request to Tavily API", tool=self.name)
        try:
            async with http_client(self.deps) as client:
                resp = await client.post(endpoint, json=payload)
        except httpx.HTTPError as e:
            raise NetworkError(f"Network error contacting Tavily: {e}", self.name, endpoint) from e

        if resp.is_error:
            self.logger.error(
                "Tavily API error",
                tool=self.name,
                status_code=resp.status_code,
                query=self.truncate_for_logging(query),
            )
            message = f"Tavily API error: {resp.status_code} {resp.reason_phrase}"
            if resp.status_code == 429:
                raise RateLimitError(message, self.name)
            raise NetworkError(message, self.name, endpoint, resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            raise ExecutionError(f"Invalid response from Tavily: {e}", self.name, e, query=query) from e

        self.logger.info(
            "Tavily search completed successfully",
            tool=self.name,
            query=self.truncate_for_logging(query),
            result_count=len(body.get("results") or []) if isinstance(body, dict) else 0,
        )
        return self.success_result(f"Searched using Tavily. Query: {query}", body)

    def sanitize_input_for_logging(self, request: BaseModel | Mapping[str, Any]) -> str:
        return self.truncated_projection(request, query=100)
