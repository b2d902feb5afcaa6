"""Unified types for the agent orchestrator.

These types provide a provider-agnostic interface for LLM interactions.
Clients convert their provider-specific formats to/from these types, and
the conversation store persists turns built from them.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Union


class MessageRole(Enum):
    """Role of a turn in the conversation."""
    USER = "user"
    ASSISTANT = "assistant"


class StopReason(Enum):
    """Reason why the model stopped generating."""
    END_TURN = "end_turn"
    TOOL_USE = "tool_use"
    MAX_TOKENS = "max_tokens"
    STOP_SEQUENCE = "stop_sequence"
    UNKNOWN = "unknown"


# ==================== content blocks ====================


@dataclass
class TextBlock:
    """Plain text content."""
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass
class ToolUseBlock:
    """A tool invocation requested by the model.

    Attributes:
        id: Request identifier, unique within one assistant turn
        name: Name of the tool to invoke
        input: Structured input for the tool
    """
    id: str
    name: str
    input: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"type": "tool_use", "id": self.id, "name": self.name, "input": self.input}


@dataclass
class ToolResultBlock:
    """The outcome of one tool invocation, answering a ToolUseBlock by id."""
    tool_use_id: str
    content: str
    is_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": "tool_result",
            "tool_use_id": self.tool_use_id,
            "content": self.content,
        }
        if self.is_error:
            result["is_error"] = True
        return result


ContentBlock = Union[TextBlock, ToolUseBlock, ToolResultBlock]


@dataclass
class Turn:
    """One message in a conversation.

    Content is either plain text or an ordered list of content blocks.

    Attributes:
        role: The role of the sender
        content: Text, or text / tool-use / tool-result blocks
    """
    role: MessageRole
    content: str | list[ContentBlock]

    @property
    def text(self) -> str:
        """Concatenated text of the turn."""
        if isinstance(self.content, str):
            return self.content
        return "".join(b.text for b in self.content if isinstance(b, TextBlock))

    @property
    def tool_uses(self) -> list[ToolUseBlock]:
        """Tool invocation requests carried by this turn."""
        if isinstance(self.content, str):
            return []
        return [b for b in self.content if isinstance(b, ToolUseBlock)]

    @property
    def tool_results(self) -> list[ToolResultBlock]:
        """Tool result blocks carried by this turn."""
        if isinstance(self.content, str):
            return []
        return [b for b in self.content if isinstance(b, ToolResultBlock)]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        if isinstance(self.content, str):
            content: Any = self.content
        else:
            content = [block.to_dict() for block in self.content]
        return {"role": self.role.value, "content": content}


# ==================== tool types ====================


@dataclass(frozen=True)
class ToolDefinition:
    """Catalog entry describing an invocable tool.

    Attributes:
        name: Tool name, unique within a registry
        description: Human-readable description for the model
        input_schema: JSON schema of the tool's named parameters
    """
    name: str
    description: str
    input_schema: dict[str, Any]

    @property
    def required(self) -> list[str]:
        return list(self.input_schema.get("required", []))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool execution. Never mutated after creation.

    Attributes:
        success: Whether the tool completed
        data: Result payload (on success)
        error: Human-readable error message (on failure)
        execution_time_ms: Time from invocation start to completion or failure
    """
    success: bool
    data: Any = None
    error: str | None = None
    execution_time_ms: float = 0.0

    @classmethod
    def ok(cls, data: Any, execution_time_ms: float) -> "ToolResult":
        return cls(success=True, data=data, execution_time_ms=execution_time_ms)

    @classmethod
    def failure(cls, error: str, execution_time_ms: float) -> "ToolResult":
        return cls(success=False, error=error, execution_time_ms=execution_time_ms)


# ==================== upstream model types ====================


@dataclass
class UsageStats:
    """Token usage statistics."""
    input_tokens: int
    output_tokens: int

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


@dataclass(frozen=True)
class GenerationParams:
    """Generation parameters sent with every model call."""
    model: str
    max_tokens: int = 4096
    temperature: float = 1.0


@dataclass
class ModelResponse:
    """Response from an LLM provider in a provider-agnostic format.

    Attributes:
        content: Ordered content blocks produced by the model
        stop_reason: Why the model stopped generating
        usage: Token usage statistics (optional)
        raw_stop_reason: The provider's own stop reason string
    """
    content: list[ContentBlock]
    stop_reason: StopReason
    usage: UsageStats | None = None
    raw_stop_reason: str | None = None

    @property
    def text(self) -> str:
        return "".join(b.text for b in self.content if isinstance(b, TextBlock))

    @property
    def tool_uses(self) -> list[ToolUseBlock]:
        return [b for b in self.content if isinstance(b, ToolUseBlock)]


# ==================== agent state types ====================


class AgentState(Enum):
    """State of one agent loop invocation."""
    AWAITING_MODEL = auto()
    EXECUTING_TOOLS = auto()
    DONE = auto()
    ABORTED = auto()


class RunOutcome(Enum):
    """How an agent loop invocation ended."""
    COMPLETED = "completed"
    MAX_ITERATIONS = "max_iterations"
    UNEXPECTED_STOP = "unexpected_stop"


@dataclass
class AgentRunResult:
    """Result of an agent run.

    Distinguishes a final answer from a best-effort answer produced after
    the iteration budget ran out or the model stopped unexpectedly.

    Attributes:
        session_key: Session the run belonged to
        state: Final loop state (DONE or ABORTED)
        outcome: Why the loop ended
        content: Final or partial answer text (empty string if none)
        iterations: Number of model calls made
        stop_reason: Stop reason of the last model response
    """
    session_key: str
    state: AgentState
    outcome: RunOutcome
    content: str = ""
    iterations: int = 0
    stop_reason: StopReason | None = None

    @property
    def is_completed(self) -> bool:
        """Check if the model produced a final answer."""
        return self.outcome == RunOutcome.COMPLETED

    @property
    def is_partial(self) -> bool:
        """Check if the content is a best-effort answer."""
        return self.outcome != RunOutcome.COMPLETED
