"""Tool implementations for the agent orchestrator.

All tools inherit from BaseTool and implement the async run method.
"""

from .base import BaseTool
from .filesystem import WriteFileTool
from .search import WebSearchTool

__all__ = [
    "BaseTool",
    "WebSearchTool",
    "WriteFileTool",
    "get_default_tools",
]


def get_default_tools() -> list[BaseTool]:
    """Get the default set of tools for the agent."""
    return [
        WebSearchTool(),
        WriteFileTool(),
    ]
