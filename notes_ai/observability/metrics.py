"""Prometheus metrics for the notes AI layer.

Defines counters and histograms for:
- LLM request volume, outcome and latency
- Estimated token usage by direction
- Classified errors and retries by kind
- Tag parsing strategy outcomes

Usage:
    from notes_ai.observability.metrics import LLM_REQUESTS_TOTAL

    LLM_REQUESTS_TOTAL.labels(model="gemini-2.5-flash", status="success").inc()
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Private registry so tests and multiple app instances do not collide
REGISTRY = CollectorRegistry(auto_describe=True)

# =============================================================================
# COUNTERS
# =============================================================================

LLM_REQUESTS_TOTAL = Counter(
    name="notes_ai_llm_requests_total",
    documentation="Total generate_text calls",
    labelnames=["model", "status"],  # success, failed
    registry=REGISTRY,
)

LLM_TOKENS_TOTAL = Counter(
    name="notes_ai_llm_tokens_total",
    documentation="Estimated LLM tokens used",
    labelnames=["model", "type"],  # input, output
    registry=REGISTRY,
)

LLM_ERRORS_TOTAL = Counter(
    name="notes_ai_llm_errors_total",
    documentation="Classified LLM errors returned to callers",
    labelnames=["kind"],
    registry=REGISTRY,
)

LLM_RETRIES_TOTAL = Counter(
    name="notes_ai_llm_retries_total",
    documentation="Retries performed after retryable failures",
    labelnames=["kind"],
    registry=REGISTRY,
)

TAGS_GENERATED_TOTAL = Counter(
    name="notes_ai_tags_generated_total",
    documentation="Tag replies parsed, by parsing strategy",
    labelnames=["strategy"],  # json, lines, failed
    registry=REGISTRY,
)

# =============================================================================
# HISTOGRAMS
# =============================================================================

LLM_REQUEST_DURATION = Histogram(
    name="notes_ai_llm_request_duration_seconds",
    documentation="generate_text duration in seconds, retries included",
    labelnames=["model"],
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 30, 60, float("inf")),
    registry=REGISTRY,
)


def get_metrics_text() -> bytes:
    """Generate Prometheus metrics in text exposition format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Content-Type header value for the metrics response."""
    return CONTENT_TYPE_LATEST
