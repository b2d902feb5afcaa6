import asyncio
from typing import Any

from tavily import TavilyClient

from ..config import get_settings
from ..exceptions import ToolExecutionError
from .base import BaseTool

DEFAULT_MAX_RESULTS = 5


class WebSearchTool(BaseTool):
    def __init__(self, api_key: str | None = None):
        api_key = api_key or get_settings().tavily_api_key
        if not api_key:
            # the agent can still start; searches fail until a key is set
            self.client = None
        else:
            self.client = TavilyClient(api_key=api_key)

    @property
    def name(self) -> str:
        return "web_search"

    @property
    def description(self) -> str:
        return (
            "Search the web for current information. Use this when you need "
            "up-to-date data or facts beyond your training."
        )

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query string"},
                "max_results": {
                    "type": "number",
                    "description": "Maximum number of results to return (default 5)",
                },
            },
            "required": ["query"],
        }

    async def run(self, query: str, max_results: int = DEFAULT_MAX_RESULTS) -> list[dict[str, str]]:
        if not isinstance(query, str) or not query.strip():
            raise ToolExecutionError(self.name, "Invalid query parameter")
        if not self.client:
            raise ToolExecutionError(self.name, "TAVILY_API_KEY not found in environment variables")

        max_results = max(1, int(max_results))
        # the tavily client is blocking
        response = await asyncio.to_thread(
            self.client.search,
            query=query,
            search_depth="basic",
            max_results=max_results,
        )

        return [
            {
                "title": result.get("title", "No Title"),
                "url": result.get("url", "No URL"),
                "snippet": result.get("content", ""),
            }
            for result in response.get("results", [])[:max_results]
        ]
