import time
from abc import ABC, abstractmethod
from typing import Any

from ..exceptions import ToolValidationError
from ..logging import get_logger
from ..types import ToolDefinition, ToolResult

logger = get_logger(__name__)


class BaseTool(ABC):
    """Abstract base class for all tools.

    Subclasses describe themselves through ``name``, ``description`` and
    ``parameters`` and implement ``run``. Callers use ``execute``, which
    never raises: any failure inside the tool comes back as a ToolResult
    with ``success=False``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the tool name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Return the tool description."""
        pass

    @property
    @abstractmethod
    def parameters(self) -> dict[str, Any]:
        """Return the JSON schema for tool parameters."""
        pass

    @abstractmethod
    async def run(self, **kwargs) -> Any:
        """Do the tool's work and return the result payload.

        Raise to signal failure; the message becomes the error result.
        """
        pass

    @property
    def definition(self) -> ToolDefinition:
        """Catalog entry for this tool."""
        return ToolDefinition(
            name=self.name,
            description=self.description,
            input_schema=self.parameters,
        )

    def validate_arguments(self, arguments: Any) -> None:
        """Check that arguments is a mapping with every required parameter.

        Raises:
            ToolValidationError: If the input is malformed
        """
        if not isinstance(arguments, dict):
            raise ToolValidationError(self.name, [f"expected an object, got {type(arguments).__name__}"])

        missing = [p for p in self.parameters.get("required", []) if p not in arguments]
        if missing:
            raise ToolValidationError(self.name, [f"missing required parameter '{p}'" for p in missing])

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        """Run the tool and wrap the outcome in a ToolResult.

        Args:
            arguments: Structured input from the model

        Returns:
            A successful result carrying the payload, or a failed result
            carrying the error message. Both are timed from invocation start.
        """
        start = time.perf_counter()
        try:
            self.validate_arguments(arguments)
            data = await self.run(**arguments)
        except Exception as e:
            elapsed = (time.perf_counter() - start) * 1000
            logger.debug(f"tool '{self.name}' failed after {elapsed:.1f}ms: {e!r}")
            return ToolResult.failure(str(e) or type(e).__name__, elapsed)

        return ToolResult.ok(data, (time.perf_counter() - start) * 1000)
