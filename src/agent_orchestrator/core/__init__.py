"""Core agent components.

This module provides the building blocks the agent loop ties together:
- ConversationStore: Per-session turn history
- RateLimiter: Sliding-window admission control for model calls
- with_retry / RetryPolicy: Bounded retry with exponential backoff
- ToolRegistry: Catalog and lookup of invocable tools
"""

from .conversation_store import ConversationStore, InMemoryConversationStore, Session
from .rate_limiter import RateLimiter
from .retry import RetryPolicy, compute_backoff, is_retryable_error, with_retry
from .tool_registry import ToolRegistry

__all__ = [
    "ConversationStore",
    "InMemoryConversationStore",
    "Session",
    "RateLimiter",
    "RetryPolicy",
    "compute_backoff",
    "is_retryable_error",
    "with_retry",
    "ToolRegistry",
]
