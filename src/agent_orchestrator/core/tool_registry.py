"""Tool catalog and lookup for the agent loop."""

from typing import Iterable

from ..logging import get_logger
from ..tools.base import BaseTool
from ..types import ToolDefinition

logger = get_logger(__name__)


class ToolRegistry:
    """Catalog of invocable tools keyed by name.

    Registering a name that already exists replaces the earlier tool, so a
    name appears at most once in the catalog. The catalog is listed in
    registration order; where a replaced tool lands in that order is
    unspecified.

    Mutation happens only in synchronous methods, so on a single event loop
    concurrent agent runs always observe a consistent catalog.
    """

    def __init__(self, tools: Iterable[BaseTool] | None = None):
        """Initialize the registry.

        Args:
            tools: Optional tools to register up front.
        """
        self._tools: dict[str, BaseTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: BaseTool) -> None:
        """Add a tool, replacing any tool already registered under its name."""
        name = tool.definition.name
        if name in self._tools:
            logger.info(f"replacing registered tool '{name}'")
        self._tools[name] = tool

    def unregister(self, name: str) -> bool:
        """Remove a tool.

        Returns:
            True if the tool was removed, False if it was not registered
        """
        return self._tools.pop(name, None) is not None

    def get_executor(self, name: str) -> BaseTool | None:
        """Get a tool by name, or None if not registered."""
        return self._tools.get(name)

    def list_definitions(self) -> list[ToolDefinition]:
        """Snapshot of the catalog."""
        return [tool.definition for tool in self._tools.values()]

    def has(self, name: str) -> bool:
        """Check if a tool exists."""
        return name in self._tools

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
