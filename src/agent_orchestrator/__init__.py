"""Agent Orchestrator - a tool-using conversation loop for LLM endpoints.

This package drives multi-turn conversations with a model that may request
tool invocations before answering, with rate limiting, retries and
per-session conversation state.
"""

from .agent import AgentConfig, AgentController
from .exceptions import (
    AgentError,
    ClientError,
    SessionNotFoundError,
    ToolError,
    TransientClientError,
)
from .metrics import InMemoryMetrics, MetricsCollector
from .types import (
    AgentRunResult,
    AgentState,
    MessageRole,
    ModelResponse,
    RunOutcome,
    StopReason,
    TextBlock,
    ToolDefinition,
    ToolResult,
    ToolResultBlock,
    ToolUseBlock,
    Turn,
)

__all__ = [
    # main agent
    "AgentConfig",
    "AgentController",
    # metrics
    "InMemoryMetrics",
    "MetricsCollector",
    # types
    "AgentRunResult",
    "AgentState",
    "MessageRole",
    "ModelResponse",
    "RunOutcome",
    "StopReason",
    "TextBlock",
    "ToolDefinition",
    "ToolResult",
    "ToolResultBlock",
    "ToolUseBlock",
    "Turn",
    # exceptions
    "AgentError",
    "ClientError",
    "SessionNotFoundError",
    "ToolError",
    "TransientClientError",
]
