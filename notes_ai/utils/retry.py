"""Retry Handler Utility

Re-invokes a failing async operation with linear backoff.

Features:
- At least one attempt, at most ``max_retries`` attempts
- Every failure is classified; non-retryable kinds propagate immediately
- Delay before retry N is ``backoff_ms * N``
- Callback support for retry notifications
- Built-in structured logging and metrics for observability
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import structlog

from notes_ai.models.llm import RetryConfig
from notes_ai.observability.metrics import LLM_RETRIES_TOTAL
from notes_ai.utils.error_classifier import classify_error

logger = structlog.get_logger(__name__)


T = TypeVar("T")


class RetryHandler:
    """Async retry handler with linear backoff.

    Holds only configuration, so one instance can serve any number of
    concurrent, independent executions.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize retry handler.

        Args:
            config: Retry configuration (defaults: 3 attempts, 1000ms)
            sleep: Coroutine used to wait between attempts, in seconds
        """
        self.config = config or RetryConfig()
        self._sleep = sleep

    def calculate_delay(self, attempt: int) -> float:
        """Delay in seconds after failed attempt ``attempt`` (1-indexed)."""
        return self.config.backoff_ms * attempt / 1000.0

    async def execute(
        self,
        func: Callable[[], Awaitable[T]],
        on_retry: Optional[Callable[[int, Exception, float], None]] = None,
    ) -> T:
        """Execute function with retry logic.

        Args:
            func: Zero-argument async function to execute
            on_retry: Optional callback called before each retry with
                     (attempt_number, exception, delay_seconds)

        Returns:
            Result of successful function execution

        Raises:
            Exception: The original error if it is non-retryable, or the
                last error once all attempts are exhausted
        """
        max_attempts = self.config.max_retries

        for attempt in range(1, max_attempts + 1):
            try:
                return await func()
            except Exception as e:
                classified = classify_error(e)

                if not classified.is_retryable:
                    raise

                if attempt >= max_attempts:
                    logger.warning(
                        "retry_exhausted",
                        attempts=attempt,
                        error_kind=classified.kind.value,
                        error_message=classified.message,
                    )
                    raise

                delay = self.calculate_delay(attempt)

                logger.warning(
                    "retry_attempt",
                    attempt=attempt,
                    max_attempts=max_attempts,
                    error_kind=classified.kind.value,
                    error_message=classified.message,
                    delay_seconds=delay,
                )
                LLM_RETRIES_TOTAL.labels(kind=classified.kind.value).inc()

                if on_retry is not None:
                    on_retry(attempt, e, delay)

                await self._sleep(delay)

        raise RuntimeError(  # pragma: no cover
            "Retry loop completed without result or exception"
        )


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    backoff_ms: int = 1000,
) -> T:
    """Run ``operation`` under a one-off RetryHandler.

    Args:
        operation: Zero-argument async function
        max_retries: Maximum attempts, including the first; values below
            1 still run the operation once
        backoff_ms: Base backoff in milliseconds

    Returns:
        The operation's result
    """
    handler = RetryHandler(
        RetryConfig(max_retries=max(1, max_retries), backoff_ms=max(0, backoff_ms))
    )
    return await handler.execute(operation)
