"""Observability for the notes AI layer.

Provides:
- Correlation ID context management for request tracing
- Structured logging (structlog) with context propagation
- Prometheus metrics for LLM usage and failures
"""

from notes_ai.observability.context import (
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
    correlation_id_context,
)
from notes_ai.observability.logging import (
    get_logger,
    configure_logging,
    bind_context,
    clear_context,
)
from notes_ai.observability.metrics import (
    LLM_REQUESTS_TOTAL,
    LLM_TOKENS_TOTAL,
    LLM_ERRORS_TOTAL,
    LLM_RETRIES_TOTAL,
    TAGS_GENERATED_TOTAL,
    LLM_REQUEST_DURATION,
    get_metrics_text,
)

__all__ = [
    # Context
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "correlation_id_context",
    # Logging
    "get_logger",
    "configure_logging",
    "bind_context",
    "clear_context",
    # Metrics
    "LLM_REQUESTS_TOTAL",
    "LLM_TOKENS_TOTAL",
    "LLM_ERRORS_TOTAL",
    "LLM_RETRIES_TOTAL",
    "TAGS_GENERATED_TOTAL",
    "LLM_REQUEST_DURATION",
    "get_metrics_text",
]
