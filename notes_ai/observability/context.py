"""Correlation ID context for tracing one note operation end to end.

A correlation ID set at the entry point (CLI command, API handler) is
stored in a ContextVar, so it follows the call across awaits: tag
generation, each retry attempt and the usage record all log the same ID.

Usage:
    from notes_ai.observability.context import correlation_id_context

    with correlation_id_context(f"note-{note_id}"):
        await tag_service.generate_tags(request)
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_current_id: ContextVar[Optional[str]] = ContextVar("notes_ai_correlation_id", default=None)


def new_correlation_id() -> str:
    return uuid.uuid4().hex


def set_correlation_id(corr_id: Optional[str] = None) -> str:
    """Make ``corr_id`` (or a fresh id) current for this task and return it."""
    corr_id = corr_id or new_correlation_id()
    _current_id.set(corr_id)
    return corr_id


def get_correlation_id() -> Optional[str]:
    return _current_id.get()


def clear_correlation_id() -> None:
    _current_id.set(None)


@contextmanager
def correlation_id_context(corr_id: Optional[str] = None) -> Iterator[str]:
    """Scope a correlation id to a ``with`` block.

    The previous id (possibly None) is restored on exit, including when
    the block raises.
    """
    token = _current_id.set(corr_id or new_correlation_id())
    try:
        yield _current_id.get()  # type: ignore[misc]
    finally:
        _current_id.reset(token)
