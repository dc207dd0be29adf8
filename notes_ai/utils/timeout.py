"""Per-attempt deadline for async operations.

``asyncio.wait_for`` cancels the awaiting task when the deadline passes.
google-genai's async transport stops reading on cancellation, but a
request the provider already accepted may still run (and bill) on the
server side. That leak cannot be prevented from the client.
"""

import asyncio
from typing import Awaitable, Callable, TypeVar

from notes_ai.utils.exceptions import ErrorKind, LLMError

T = TypeVar("T")


async def with_timeout(operation: Callable[[], Awaitable[T]], timeout_ms: int) -> T:
    """Await ``operation()`` for at most ``timeout_ms`` milliseconds.

    Args:
        operation: Zero-argument async function
        timeout_ms: Deadline in milliseconds

    Returns:
        The operation's result

    Raises:
        LLMError: TIMEOUT kind if the deadline elapses first
    """
    try:
        return await asyncio.wait_for(operation(), timeout=timeout_ms / 1000.0)
    except asyncio.TimeoutError as e:
        raise LLMError(
            ErrorKind.TIMEOUT, f"Operation timed out after {timeout_ms}ms", e
        ) from e
