"""Tests for the per-attempt deadline."""

import asyncio

import pytest

from notes_ai.utils.exceptions import ErrorKind, LLMError
from notes_ai.utils.timeout import with_timeout


class TestWithTimeout:
    """Tests for with_timeout."""

    @pytest.mark.asyncio
    async def test_returns_result(self):
        async def operation():
            return "done"

        assert await with_timeout(operation, 1000) == "done"

    @pytest.mark.asyncio
    async def test_times_out(self):
        async def operation():
            await asyncio.sleep(5)
            return "late"

        with pytest.raises(LLMError) as exc_info:
            await with_timeout(operation, 10)

        assert exc_info.value.kind == ErrorKind.TIMEOUT
        assert exc_info.value.message == "Operation timed out after 10ms"
        assert exc_info.value.is_retryable is True

    @pytest.mark.asyncio
    async def test_operation_errors_propagate(self):
        async def operation():
            raise ValueError("bad")

        with pytest.raises(ValueError, match="bad"):
            await with_timeout(operation, 1000)

    @pytest.mark.asyncio
    async def test_slow_operation_is_cancelled(self):
        cancelled = asyncio.Event()

        async def operation():
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        with pytest.raises(LLMError):
            await with_timeout(operation, 10)

        assert cancelled.is_set()
