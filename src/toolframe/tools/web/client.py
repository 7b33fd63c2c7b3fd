"""HTTP client access shared by the web tools."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import urlparse

import httpx

from ...core import ToolDependencies

DEFAULT_TIMEOUT = 30.0


@asynccontextmanager
async def http_client(deps: ToolDependencies) -> AsyncIterator[httpx.AsyncClient]:
    """Injected client when present, otherwise a short-lived one."""
    if deps.http is not None:
        yield deps.http
        return
    async with httpx.AsyncClient(follow_redirects=True, timeout=DEFAULT_TIMEOUT) as client:
        yield client


def is_valid_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def sanitize_url(url: str) -> str:
    """scheme://host/path with query, fragment and credentials dropped."""
    if not is_valid_url(url):
        return "[INVALID URL]"
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.hostname}{parsed.path}"
