"""Anthropic client implementation.

This client handles communication with the Anthropic Messages API (Claude
models) and normalizes responses to the unified format.

Anthropic specifics:
- Tool calls arrive as content blocks with type "tool_use"
- Tool results go back in user turns as blocks with type "tool_result"
- The SDK's own retries are disabled; the agent loop owns retry policy
"""

import os
from typing import Any

import anthropic
from anthropic import AsyncAnthropic

from ..exceptions import (
    AuthenticationError,
    ClientError,
    InvalidRequestError,
    InvalidResponseError,
    ProviderUnavailableError,
    RateLimitError,
)
from ..types import (
    GenerationParams,
    ModelResponse,
    StopReason,
    TextBlock,
    ToolDefinition,
    ToolUseBlock,
    Turn,
    UsageStats,
)
from .base import BaseLLMClient

_STOP_REASONS = {
    "end_turn": StopReason.END_TURN,
    "tool_use": StopReason.TOOL_USE,
    "max_tokens": StopReason.MAX_TOKENS,
    "stop_sequence": StopReason.STOP_SEQUENCE,
}


class AnthropicClient(BaseLLMClient):
    """Anthropic API client with unified response handling."""

    def __init__(
        self,
        api_key: str | None = None,
        system_prompt: str | None = None,
        client: AsyncAnthropic | None = None,
    ):
        """Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key. Defaults to ANTHROPIC_API_KEY env var.
            system_prompt: Optional system prompt sent with every request.
            client: Pre-built SDK client (mainly for tests).
        """
        self.client = client or AsyncAnthropic(
            api_key=api_key or os.environ.get("ANTHROPIC_API_KEY"),
            max_retries=0,
        )
        self.system_prompt = system_prompt

    async def generate(
        self,
        turns: list[Turn],
        tools: list[ToolDefinition],
        params: GenerationParams,
    ) -> ModelResponse:
        """Generate a response from Anthropic.

        Raises:
            AuthenticationError: If API key is invalid
            RateLimitError: If rate limit is exceeded
            ProviderUnavailableError: On connection errors, timeouts and 5xx
            InvalidRequestError: On any other error status
            InvalidResponseError: If the response cannot be parsed
        """
        kwargs: dict[str, Any] = {
            "model": params.model,
            "max_tokens": params.max_tokens,
            "temperature": params.temperature,
            "messages": self._convert_messages(turns),
        }
        if tools:
            kwargs["tools"] = self._convert_tools(tools)
        if self.system_prompt:
            kwargs["system"] = self.system_prompt

        try:
            response = await self.client.messages.create(**kwargs)
        except anthropic.AuthenticationError as e:
            raise AuthenticationError(f"Anthropic authentication failed: {e}") from e
        except anthropic.RateLimitError as e:
            raise RateLimitError("Anthropic rate limit exceeded", retry_after=_retry_after(e)) from e
        except anthropic.APIConnectionError as e:
            # also covers APITimeoutError
            raise ProviderUnavailableError(f"Anthropic API unavailable: {e}") from e
        except anthropic.APIStatusError as e:
            if e.status_code >= 500:
                raise ProviderUnavailableError(
                    f"Anthropic API error {e.status_code}: {e}", status_code=e.status_code
                ) from e
            raise InvalidRequestError(
                f"Anthropic rejected the request ({e.status_code}): {e}", status_code=e.status_code
            ) from e
        except anthropic.APIError as e:
            raise ClientError(f"Anthropic API error: {e}") from e

        return self._parse_response(response)

    def _convert_messages(self, turns: list[Turn]) -> list[dict[str, Any]]:
        """Convert turns to Anthropic message dicts."""
        return [turn.to_dict() for turn in turns]

    def _convert_tools(self, tools: list[ToolDefinition]) -> list[dict[str, Any]]:
        """Convert tools to Anthropic format with input_schema."""
        return [tool.to_dict() for tool in tools]

    def _parse_response(self, response: Any) -> ModelResponse:
        """Parse Anthropic response into unified format."""
        try:
            content: list[TextBlock | ToolUseBlock] = []
            for block in response.content:
                if block.type == "text":
                    content.append(TextBlock(text=block.text))
                elif block.type == "tool_use":
                    content.append(ToolUseBlock(
                        id=block.id,
                        name=block.name,
                        input=dict(block.input or {}),
                    ))

            usage = None
            if getattr(response, "usage", None) is not None:
                usage = UsageStats(
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                )

            raw = response.stop_reason
            return ModelResponse(
                content=content,
                stop_reason=_STOP_REASONS.get(raw, StopReason.UNKNOWN),
                usage=usage,
                raw_stop_reason=raw,
            )
        except Exception as e:
            raise InvalidResponseError(f"Failed to parse Anthropic response: {e}") from e


def _retry_after(error: Exception) -> float | None:
    response = getattr(error, "response", None)
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    try:
        return float(headers.get("retry-after"))
    except (TypeError, ValueError):
        return None
