"""fetchWebsite: GET a page, chunk it, and serve chunks from the web cache.

Without ``chunk_index`` the page is always fetched fresh and the cached set
replaced. With ``chunk_index`` the cached set is reused when present, so a
caller can page through a large document with one download.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Literal

import httpx
import orjson
from pydantic import BaseModel, ConfigDict, Field, PositiveInt

from ...chunking import ChunkCategory, ChunkSet, create_web_chunks, extract_main_content, format_chunk_output
from ...core import BaseTool, ToolCategory, ToolMetadata, ToolParams
from ...errors import ExecutionError, NetworkError, RateLimitError
from .client import http_client, is_valid_url, sanitize_url


class FetchWebsiteOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    method: Literal["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD"] = "GET"
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = Field(default=None, description="JSON request body")
    chunk_index: PositiveInt | None = Field(default=None, description="1-based chunk to return")
    chunk_size: PositiveInt | None = Field(default=None, description="Characters per chunk")
    cleaning: bool = Field(default=False, description="Strip markup and keep visible text")


class FetchWebsiteParams(ToolParams):
    type: Literal["fetchWebsite"] = "fetchWebsite"
    url: str = Field(..., min_length=1)
    options: FetchWebsiteOptions = Field(default_factory=FetchWebsiteOptions)


class FetchWebsiteTool(BaseTool[FetchWebsiteParams]):
    """Fetch and parse website content with optional chunking."""

    metadata: ClassVar[ToolMetadata] = ToolMetadata(
        name="fetchWebsite",
        description="Fetch and parse website content with optional chunking",
        category=ToolCategory.WEB,
    )
    params_schema: ClassVar[type[FetchWebsiteParams]] = FetchWebsiteParams

    def check(self, params: FetchWebsiteParams) -> list[str]:
        return [] if is_valid_url(params.url) else ["Invalid URL format"]

    async def run(self, params: FetchWebsiteParams) -> str:
        url, opts = params.url, params.options
        chunks_store = self.deps.chunks
        size = opts.chunk_size or chunks_store.max_chunk_size
        key = f"{url}#clean@{size}" if opts.cleaning else f"{url}@{size}"
        self.logger.debug(
            f"Fetching website: {sanitize_url(url)}",
            tool=self.name,
            method=opts.method,
            chunk_index=opts.chunk_index,
            cleaning=opts.cleaning,
        )

        async def produce() -> ChunkSet:
            content = await self._fetch(params)
            if opts.cleaning:
                content = extract_main_content(content)
            self.logger.verbose("Splitting content into chunks", tool=self.name, cleaning=opts.cleaning)
            return create_web_chunks(content, url, size)

        if opts.chunk_index is None:
            chunks_store.clear(ChunkCategory.WEB, key)
        chunks = await chunks_store.get_or_create(ChunkCategory.WEB, key, produce)

        if opts.chunk_index is not None:
            chunk = chunks_store.get_chunk(chunks, opts.chunk_index)
            self.logger.info(
                f"Returning website content chunk {chunk.index}/{chunk.total}",
                tool=self.name,
                content_length=len(chunk.content),
            )
            return format_chunk_output(chunk, "Chunk")

        if len(chunks) == 1:
            self.logger.info("Returning complete website content", tool=self.name, content_length=len(chunks[0].content))
            return f"Content successfully retrieved:\n\n{chunks[0].content}"

        self.logger.info(f"Returning website content summary with {len(chunks)} chunks", tool=self.name)
        return chunks_store.create_chunk_summary(chunks)

    async def _fetch(self, params: FetchWebsiteParams) -> str:
        url, opts = params.url, params.options
        limit = self.get_config("http.max_response_size")
        try:
            async with http_client(self.deps) as client:
                resp = await client.request(
                    opts.method,
                    url,
                    headers=opts.headers or None,
                    json=opts.body if opts.body is not None and not isinstance(opts.body, str) else None,
                    content=opts.body if isinstance(opts.body, str) else None,
                )
        except httpx.HTTPError as e:
            raise NetworkError(f"Network error fetching website: {e}", self.name, url) from e

        self.logger.debug(
            f"Website fetch completed: {sanitize_url(url)}",
            tool=self.name,
            status_code=resp.status_code,
            content_length=len(resp.content),
            content_type=resp.headers.get("content-type"),
        )
        if resp.status_code == 429:
            raise RateLimitError(f"Rate limited by {sanitize_url(url)}", self.name)
        if resp.is_error:
            raise NetworkError(
                f"HTTP {resp.status_code}: {resp.reason_phrase}", self.name, url, resp.status_code,
            )
        if isinstance(limit, int) and len(resp.content) > limit:
            raise ExecutionError(f"Response exceeds {limit} bytes", self.name, url=url)
        try:
            if "json" in resp.headers.get("content-type", ""):
                return orjson.dumps(resp.json(), option=orjson.OPT_INDENT_2).decode()
            return resp.text
        except (ValueError, orjson.JSONEncodeError) as e:
            raise ExecutionError(f"Error fetching website: {e}", self.name, e, url=url) from e

    def sanitize_input_for_logging(self, request: BaseModel | Mapping[str, Any]) -> str:
        payload = request.model_dump(mode="json") if isinstance(request, BaseModel) else dict(request)
        if isinstance(payload.get("url"), str):
            payload["url"] = sanitize_url(payload["url"])
        options = payload.get("options")
        if isinstance(options, Mapping) and options.get("headers"):
            payload["options"] = {**options, "headers": "[REDACTED]"}
        return BaseTool.sanitize_input_for_logging(self, payload)
