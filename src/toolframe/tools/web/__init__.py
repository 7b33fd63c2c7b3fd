"""Web tools: page fetching and Tavily search."""

from .client import http_client, is_valid_url, sanitize_url
from .fetch import FetchWebsiteOptions, FetchWebsiteParams, FetchWebsiteTool
from .search import TAVILY_ENDPOINT, TavilySearchOption, TavilySearchParams, TavilySearchTool

__all__ = [
    "FetchWebsiteOptions", "FetchWebsiteParams", "FetchWebsiteTool",
    "TAVILY_ENDPOINT", "TavilySearchOption", "TavilySearchParams", "TavilySearchTool",
    "http_client", "is_valid_url", "sanitize_url",
]
