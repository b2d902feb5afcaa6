"""LLM client implementations.

All clients implement the BaseLLMClient interface and normalize
provider-specific responses to unified types.
"""

from .anthropic import AnthropicClient
from .base import BaseLLMClient

__all__ = [
    "BaseLLMClient",
    "AnthropicClient",
]
