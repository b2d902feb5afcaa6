"""Main agent implementation.

The AgentController orchestrates conversations between the user, the LLM
and tools. It uses unified types for all interactions, making it
provider-agnostic.
"""

import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any

from .clients.base import BaseLLMClient
from .config import Settings
from .core import (
    ConversationStore,
    InMemoryConversationStore,
    RateLimiter,
    RetryPolicy,
    ToolRegistry,
    with_retry,
)
from .exceptions import ProviderUnavailableError, ToolNotFoundError
from .logging import get_logger
from .metrics import InMemoryMetrics, MetricsCollector
from .types import (
    AgentRunResult,
    AgentState,
    GenerationParams,
    MessageRole,
    ModelResponse,
    RunOutcome,
    StopReason,
    ToolResultBlock,
    ToolUseBlock,
    Turn,
)

logger = get_logger(__name__)


@dataclass
class AgentConfig:
    """Configuration for the agent loop.

    Attributes:
        model: Model identifier sent upstream
        max_tokens: Maximum output tokens per model call
        temperature: Sampling temperature
        max_iterations: Model calls allowed per processed message
        max_retries: Attempts per model call, including the first
        retry_base_delay_ms: First backoff delay
        retry_max_delay_ms: Backoff ceiling
        rate_limit_per_minute: Model calls admitted per minute
        request_timeout: Optional timeout (seconds) for a single model call
        serialize_sessions: Run at most one message per session key at a time
    """

    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 4096
    temperature: float = 1.0
    max_iterations: int = 10
    max_retries: int = 3
    retry_base_delay_ms: int = 1000
    retry_max_delay_ms: int = 10_000
    rate_limit_per_minute: int = 50
    request_timeout: float | None = None
    serialize_sessions: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "AgentConfig":
        """Build the loop configuration from application settings."""
        return cls(
            model=settings.llm_model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            max_iterations=settings.max_iterations,
            max_retries=settings.max_retries,
            retry_base_delay_ms=settings.retry_base_delay_ms,
            retry_max_delay_ms=settings.retry_max_delay_ms,
            rate_limit_per_minute=settings.rate_limit_per_minute,
            request_timeout=settings.request_timeout,
        )

    @property
    def generation_params(self) -> GenerationParams:
        return GenerationParams(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )


class AgentController:
    """Agent that coordinates between LLM and tools.

    Each call to run() drives one turn-taking loop for a session:
    1. Append the user's text to the session
    2. Wait for rate-limiter admission and call the LLM (with retries)
    3. If the LLM requests tool calls, execute them in order
    4. Append the tool results and repeat until a final answer, the
       iteration cap, or an unexpected stop reason

    Tool failures are fed back to the model as error results and never
    raised. Upstream failures are raised once retries are exhausted or the
    error is terminal; turns already appended stay in the session.
    """

    def __init__(
        self,
        client: BaseLLMClient,
        config: AgentConfig | None = None,
        *,
        store: ConversationStore | None = None,
        registry: ToolRegistry | None = None,
        rate_limiter: RateLimiter | None = None,
        metrics: MetricsCollector | None = None,
        retry_policy: RetryPolicy | None = None,
    ):
        """Initialize the controller.

        Args:
            client: The LLM client to use (provider-agnostic)
            config: Loop configuration (defaults if omitted)
            store: Conversation store (in-memory if omitted)
            registry: Tool registry (empty if omitted)
            rate_limiter: Admission control (built from config if omitted)
            metrics: Metrics collector (in-memory if omitted)
            retry_policy: Retry policy for model calls (built from config if omitted)
        """
        self.client = client
        self.config = config or AgentConfig()
        self.store = store if store is not None else InMemoryConversationStore()
        self.registry = registry if registry is not None else ToolRegistry()
        self.rate_limiter = rate_limiter or RateLimiter(self.config.rate_limit_per_minute)
        self.metrics = metrics if metrics is not None else InMemoryMetrics()
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=self.config.max_retries,
            base_delay_ms=self.config.retry_base_delay_ms,
            max_delay_ms=self.config.retry_max_delay_ms,
        )
        self._session_locks: dict[str, asyncio.Lock] = {}

    async def process_message(self, session_key: str, user_text: str) -> str:
        """Run a conversation turn and return the answer text.

        Returns:
            The final answer, or best-effort partial text (possibly empty)
            if the loop ended without one. Use run() to tell them apart.
        """
        result = await self.run(session_key, user_text)
        return result.content

    async def run(self, session_key: str, user_text: str) -> AgentRunResult:
        """Run a conversation turn with the given user input.

        Args:
            session_key: Session to continue (created on first use)
            user_text: The user's message

        Returns:
            AgentRunResult with the answer and how the loop ended

        Raises:
            ClientError: If the upstream call fails terminally or retries run out
        """
        if not self.config.serialize_sessions:
            return await self._run(session_key, user_text)

        lock = self._session_locks.setdefault(session_key, asyncio.Lock())
        async with lock:
            return await self._run(session_key, user_text)

    async def _run(self, session_key: str, user_text: str) -> AgentRunResult:
        logger.info(f"processing message for session {session_key} ({len(user_text)} chars)")
        self.metrics.increment("messages_processed")

        self.store.get_or_create(session_key)
        self.store.append_turn(session_key, Turn(role=MessageRole.USER, content=user_text))

        state = AgentState.AWAITING_MODEL
        outcome = RunOutcome.MAX_ITERATIONS
        iteration = 0
        text = ""
        stop_reason: StopReason | None = None

        while iteration < self.config.max_iterations:
            iteration += 1
            logger.debug(f"session {session_key}: iteration {iteration}")

            response = await self._call_model(session_key)
            stop_reason = response.stop_reason

            if stop_reason == StopReason.END_TURN:
                text = response.text
                self.store.append_turn(
                    session_key, Turn(role=MessageRole.ASSISTANT, content=response.content)
                )
                state, outcome = AgentState.DONE, RunOutcome.COMPLETED
                break

            if response.text:
                text = response.text

            if stop_reason == StopReason.TOOL_USE and response.tool_uses:
                self.store.append_turn(
                    session_key, Turn(role=MessageRole.ASSISTANT, content=response.content)
                )
                state = AgentState.EXECUTING_TOOLS
                results = await self._execute_tools(response.tool_uses)
                self.store.append_turn(session_key, Turn(role=MessageRole.USER, content=results))
                state = AgentState.AWAITING_MODEL
                continue

            logger.warning(
                f"unexpected stop reason for session {session_key}: "
                f"{response.raw_stop_reason or stop_reason.value}"
            )
            self._append_partial(session_key, response)
            state, outcome = AgentState.ABORTED, RunOutcome.UNEXPECTED_STOP
            break
        else:
            logger.warning(f"max iterations ({self.config.max_iterations}) reached for session {session_key}")
            self.metrics.increment("max_iterations_reached")
            state = AgentState.ABORTED

        logger.info(
            f"message processed for session {session_key}: {outcome.value} "
            f"after {iteration} iterations ({len(text)} chars)"
        )
        return AgentRunResult(
            session_key=session_key,
            state=state,
            outcome=outcome,
            content=text,
            iterations=iteration,
            stop_reason=stop_reason,
        )

    def _append_partial(self, session_key: str, response: ModelResponse) -> None:
        """Keep the text of an aborted response so turns keep alternating.

        Tool requests are dropped: nothing will answer them.
        """
        text_blocks = [b for b in response.content if not isinstance(b, ToolUseBlock)]
        if text_blocks:
            self.store.append_turn(session_key, Turn(role=MessageRole.ASSISTANT, content=text_blocks))

    async def _call_model(self, session_key: str) -> ModelResponse:
        """Call the LLM with the session history and tool catalog."""
        await self.rate_limiter.acquire()
        self.metrics.increment("api_calls")

        session = self.store.get(session_key)
        turns = list(session.turns) if session else []
        tools = self.registry.list_definitions()
        params = self.config.generation_params

        async def _generate() -> ModelResponse:
            call = self.client.generate(turns, tools, params)
            if not self.config.request_timeout:
                return await call
            try:
                return await asyncio.wait_for(call, timeout=self.config.request_timeout)
            except asyncio.TimeoutError as e:
                raise ProviderUnavailableError(
                    f"Model call timed out after {self.config.request_timeout}s"
                ) from e

        start = time.perf_counter()
        try:
            response = await with_retry(_generate, self.retry_policy)
        except Exception as e:
            self.metrics.increment("api_errors")
            logger.error(f"model call failed for session {session_key}: {e}")
            raise

        duration = (time.perf_counter() - start) * 1000
        self.metrics.gauge("api_latency_ms", duration)
        logger.debug(f"model call succeeded in {duration:.0f}ms (stop: {response.raw_stop_reason})")
        return response

    async def _execute_tools(self, requests: list[ToolUseBlock]) -> list[ToolResultBlock]:
        """Execute tool requests sequentially, one result block per request."""
        results: list[ToolResultBlock] = []

        for request in requests:
            name = request.name
            logger.info(f"executing tool '{name}' (id: {request.id})")
            self.metrics.increment(f"tool_executions.{name}")

            tool = self.registry.get_executor(name)
            if tool is None:
                error = ToolNotFoundError(name)
                logger.error(f"tool not found: {name}")
                results.append(ToolResultBlock(
                    tool_use_id=request.id,
                    content=f"Error: {error}",
                    is_error=True,
                ))
                continue

            result = await tool.execute(request.input)

            if result.success:
                logger.info(f"tool '{name}' succeeded in {result.execution_time_ms:.0f}ms")
                self.metrics.gauge(f"tool_latency.{name}", result.execution_time_ms)
                results.append(ToolResultBlock(
                    tool_use_id=request.id,
                    content=_serialize(result.data),
                ))
            else:
                logger.error(f"tool '{name}' failed: {result.error}")
                self.metrics.increment(f"tool_errors.{name}")
                results.append(ToolResultBlock(
                    tool_use_id=request.id,
                    content=f"Error: {result.error}",
                    is_error=True,
                ))

        return results

    def get_metrics(self) -> dict[str, Any]:
        """Metrics snapshot plus rate limiter stats and active session count."""
        return {
            **self.metrics.snapshot(),
            "rate_limiter": self.rate_limiter.stats(),
            "active_sessions": self.store.active_count,
        }

    def get_history(self, session_key: str) -> list[dict]:
        """Get a session's history as list of dicts (empty if unknown)."""
        session = self.store.get(session_key)
        return session.get_history() if session else []

    def clear_session(self, session_key: str) -> None:
        """Forget a session's history.

        The session lock survives so runs already queued on it stay serialized.
        """
        self.store.clear(session_key)


def _serialize(data: Any) -> str:
    return json.dumps(data, default=str)
