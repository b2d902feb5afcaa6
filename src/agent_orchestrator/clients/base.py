"""Base class for LLM clients.

Provider clients inherit from BaseLLMClient and implement the conversion
methods between provider-specific formats and the unified types. The agent
loop treats a client as a black box: send turns plus the tool catalog,
receive either a final answer or a list of tool invocation requests.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..types import GenerationParams, ModelResponse, ToolDefinition, Turn


class BaseLLMClient(ABC):
    """Abstract base class for all LLM clients.

    Each client is responsible for:
    1. Converting Turn list to provider format
    2. Converting tool definitions to provider format
    3. Making the API call
    4. Converting the response back to a ModelResponse
    5. Translating provider errors into the ClientError hierarchy, so the
       retry executor can tell transient failures from terminal ones

    Clients must not retry on their own; retries belong to the agent loop.
    """

    @abstractmethod
    async def generate(
        self,
        turns: list[Turn],
        tools: list[ToolDefinition],
        params: GenerationParams,
    ) -> ModelResponse:
        """Generate a response from the LLM.

        Args:
            turns: Full ordered conversation history
            tools: Tool catalog offered to the model (may be empty)
            params: Model identifier, max output tokens, temperature

        Returns:
            ModelResponse with content blocks and stop reason

        Raises:
            TransientClientError: For failures worth retrying
            ClientError: For terminal failures
        """

    @abstractmethod
    def _convert_messages(self, turns: list[Turn]) -> Any:
        """Convert unified turns to provider-specific format."""

    @abstractmethod
    def _convert_tools(self, tools: list[ToolDefinition]) -> list[dict[str, Any]]:
        """Convert tool definitions to provider-specific format."""

    @abstractmethod
    def _parse_response(self, response: Any) -> ModelResponse:
        """Parse provider response into unified format."""
