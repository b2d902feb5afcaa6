"""Retry with exponential backoff for upstream calls."""

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

from ..exceptions import TransientClientError
from ..logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def is_retryable_error(error: BaseException) -> bool:
    """Classify an upstream failure as transient or terminal.

    Transient: connection resets, timeouts, our TransientClientError family,
    and anything carrying an HTTP status of 429 or 5xx. Everything else is
    terminal.
    """
    if isinstance(error, TransientClientError):
        return True

    if isinstance(error, (ConnectionResetError, TimeoutError, asyncio.TimeoutError)):
        return True

    status = getattr(error, "status_code", None)
    if status is None:
        status = getattr(error, "status", None)
    if isinstance(status, int):
        return status == 429 or 500 <= status < 600

    return False


@dataclass(frozen=True)
class RetryPolicy:
    """How many times and how patiently to retry an operation.

    Attributes:
        max_attempts: Total invocations allowed, including the first
        base_delay_ms: Delay before the second attempt
        max_delay_ms: Ceiling for the un-jittered delay
        is_retryable: Classifier deciding whether an error may be retried
        jitter_ratio: Upper bound of the random extra delay, as a fraction
    """

    max_attempts: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 10_000
    is_retryable: Callable[[BaseException], bool] = is_retryable_error
    jitter_ratio: float = 0.3


def compute_backoff(attempt: int, policy: RetryPolicy) -> float:
    """Un-jittered delay in milliseconds after the given (1-based) attempt."""
    return min(policy.base_delay_ms * 2 ** (attempt - 1), policy.max_delay_ms)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """Run an async operation, retrying transient failures.

    The operation is invoked at most ``policy.max_attempts`` times. A
    non-retryable error propagates immediately; when attempts run out the
    most recent error propagates.

    Args:
        operation: Zero-argument coroutine factory
        policy: Retry policy
        sleep: Coroutine used for backoff delays (seconds)

    Returns:
        The operation's result.

    Example:
        response = await with_retry(lambda: client.generate(...), RetryPolicy())
    """
    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as e:
            if not policy.is_retryable(e):
                logger.debug(f"non-retryable error on attempt {attempt}: {e!r}")
                raise

            if attempt >= policy.max_attempts:
                logger.warning(f"max attempts ({policy.max_attempts}) exceeded: {e}")
                raise

            delay = compute_backoff(attempt, policy)
            delay += random.uniform(0, policy.jitter_ratio * delay)

            logger.info(
                f"retry {attempt}/{policy.max_attempts - 1} after {delay / 1000:.2f}s: {e}"
            )
            await sleep(delay / 1000)
            attempt += 1
