"""Custom exception hierarchy for the agent orchestrator.

This module defines all custom exceptions used throughout the orchestrator,
organized into logical categories: state errors, client errors, tool errors,
and security errors.
"""


class AgentError(Exception):
    """Base exception for all agent errors."""


# =============================================================================
# State Errors - Issues with conversation state and admission control
# =============================================================================

class SessionNotFoundError(AgentError):
    """A turn was appended to a session that does not exist."""

    def __init__(self, session_key: str):
        self.session_key = session_key
        super().__init__(f"Session {session_key} not found")


class RateLimiterError(AgentError):
    """The rate limiter could not admit a request within its wait budget."""

    def __init__(self, cycles: int):
        self.cycles = cycles
        super().__init__(f"Rate limiter gave up after {cycles} wait cycles")


# =============================================================================
# Client Errors - Issues with LLM API interactions
# =============================================================================

class ClientError(AgentError):
    """Base class for LLM client errors.

    Errors of this class (but not of TransientClientError) are terminal
    unless their status code says otherwise.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class TransientClientError(ClientError):
    """Base class for upstream failures worth retrying."""


class RateLimitError(TransientClientError):
    """Rate limit exceeded."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: float | None = None):
        self.retry_after = retry_after
        if retry_after:
            message = f"{message}. Retry after: {retry_after}s"
        super().__init__(message, status_code=429)


class ProviderUnavailableError(TransientClientError):
    """Provider API is temporarily unavailable (network error, timeout, 5xx)."""


class AuthenticationError(ClientError):
    """API key is invalid or missing."""

    def __init__(self, message: str):
        super().__init__(message, status_code=401)


class InvalidRequestError(ClientError):
    """The provider rejected the request."""


class InvalidResponseError(ClientError):
    """Response from provider could not be parsed."""


# =============================================================================
# Tool Errors - Issues with tool execution
# =============================================================================

class ToolError(AgentError):
    """Base class for tool execution errors."""


class ToolNotFoundError(ToolError):
    """Requested tool does not exist."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool {tool_name} not found")


class ToolExecutionError(ToolError):
    """Tool execution failed."""

    def __init__(self, tool_name: str, cause: Exception | str):
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(f"Tool '{tool_name}' execution failed: {cause}")


class ToolValidationError(ToolError):
    """Tool arguments failed validation."""

    def __init__(self, tool_name: str, errors: list[str]):
        self.tool_name = tool_name
        self.errors = errors
        super().__init__(f"Tool '{tool_name}' validation failed: {', '.join(errors)}")


# =============================================================================
# Security Errors - Security-related issues
# =============================================================================

class SecurityError(AgentError):
    """Base class for security-related errors."""


class PathTraversalError(SecurityError):
    """Attempted to write outside the allowed directory."""

    def __init__(self, attempted_path: str, allowed_base: str):
        self.attempted_path = attempted_path
        self.allowed_base = allowed_base
        super().__init__(
            f"Invalid filename or path traversal detected: '{attempted_path}' "
            f"is not a plain file name inside '{allowed_base}'"
        )
