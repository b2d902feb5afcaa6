"""Shared test fixtures and configuration."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from agent_orchestrator.agent import AgentConfig, AgentController
from agent_orchestrator.clients.base import BaseLLMClient
from agent_orchestrator.core import InMemoryConversationStore, RateLimiter, RetryPolicy, ToolRegistry
from agent_orchestrator.metrics import InMemoryMetrics
from agent_orchestrator.tools.base import BaseTool
from agent_orchestrator.types import (
    ModelResponse,
    StopReason,
    TextBlock,
    ToolUseBlock,
    UsageStats,
)


class EchoTool(BaseTool):
    """Returns its msg argument."""

    @property
    def name(self) -> str:
        return "echo"

    @property
    def description(self) -> str:
        return "Echo a message back"

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {"msg": {"type": "string"}},
            "required": ["msg"],
        }

    async def run(self, msg: str) -> dict[str, str]:
        return {"echoed": msg}


class FailingTool(BaseTool):
    """Always raises."""

    @property
    def name(self) -> str:
        return "explode"

    @property
    def description(self) -> str:
        return "Always fails"

    @property
    def parameters(self) -> dict[str, Any]:
        return {"type": "object", "properties": {}}

    async def run(self) -> None:
        raise RuntimeError("boom")


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def text_response(text: str) -> ModelResponse:
    """Build a terminal response with one text block."""
    return ModelResponse(
        content=[TextBlock(text=text)],
        stop_reason=StopReason.END_TURN,
        usage=UsageStats(input_tokens=10, output_tokens=5),
        raw_stop_reason="end_turn",
    )


def tool_response(name: str, arguments: dict, tool_use_id: str = "toolu_1", text: str | None = None) -> ModelResponse:
    """Build a response requesting one tool invocation."""
    content: list = []
    if text:
        content.append(TextBlock(text=text))
    content.append(ToolUseBlock(id=tool_use_id, name=name, input=arguments))
    return ModelResponse(content=content, stop_reason=StopReason.TOOL_USE, raw_stop_reason="tool_use")


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def mock_client():
    """Create a mock LLM client."""
    client = MagicMock(spec=BaseLLMClient)
    client.generate = AsyncMock()
    return client


@pytest.fixture
def store():
    return InMemoryConversationStore()


@pytest.fixture
def registry():
    return ToolRegistry([EchoTool()])


@pytest.fixture
def metrics():
    collector = InMemoryMetrics()
    yield collector
    collector.reset()


@pytest.fixture
def agent_config():
    return AgentConfig(model="test-model", max_tokens=256, temperature=0.0, max_iterations=5)


@pytest.fixture
def controller(mock_client, agent_config, store, registry, metrics, fake_clock):
    """Controller wired with in-memory parts and no real waiting."""
    return AgentController(
        mock_client,
        agent_config,
        store=store,
        registry=registry,
        metrics=metrics,
        rate_limiter=RateLimiter(100, clock=fake_clock, sleep=fake_clock.sleep),
        retry_policy=RetryPolicy(max_attempts=3, base_delay_ms=0, max_delay_ms=0),
    )


@pytest.fixture
def echo_tool():
    return EchoTool()


@pytest.fixture
def failing_tool():
    return FailingTool()


@pytest.fixture
def make_text_response():
    return text_response


@pytest.fixture
def make_tool_response():
    return tool_response
