"""Usage Recorder

Records one UsageLogEntry per generate_text call:
- Structured log line (debug level on success, warning on failure)
- Prometheus request/token/duration counters
- In-memory, append-only history with a summary view

Entries are not persisted; the history is capped so a long-lived client
does not grow without bound.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional

import structlog

from notes_ai.models.llm import UsageLogEntry
from notes_ai.observability.metrics import (
    LLM_REQUESTS_TOTAL,
    LLM_REQUEST_DURATION,
    LLM_TOKENS_TOTAL,
)

logger = structlog.get_logger()

DEFAULT_HISTORY_SIZE = 1000


@dataclass
class ModelUsage:
    """Aggregated usage for a single model."""

    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0

    def record(self, entry: UsageLogEntry) -> None:
        self.requests += 1
        self.input_tokens += entry.input_tokens
        self.output_tokens += entry.output_tokens
        if entry.success:
            self.successful_requests += 1
        else:
            self.failed_requests += 1


@dataclass
class UsageRecorder:
    """Collects usage entries for observability.

    Attributes:
        history_size: Maximum number of entries kept in memory
        by_model: Per-model aggregates (never trimmed)
    """

    history_size: int = DEFAULT_HISTORY_SIZE
    by_model: Dict[str, ModelUsage] = field(default_factory=dict)
    _entries: Deque[UsageLogEntry] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._entries = deque(maxlen=self.history_size)

    def record(self, entry: UsageLogEntry) -> None:
        """Append an entry and publish it to logs and metrics."""
        self._entries.append(entry)

        if entry.model not in self.by_model:
            self.by_model[entry.model] = ModelUsage(model=entry.model)
        self.by_model[entry.model].record(entry)

        status = "success" if entry.success else "failed"
        LLM_REQUESTS_TOTAL.labels(model=entry.model, status=status).inc()
        LLM_TOKENS_TOTAL.labels(model=entry.model, type="input").inc(
            entry.input_tokens
        )
        LLM_TOKENS_TOTAL.labels(model=entry.model, type="output").inc(
            entry.output_tokens
        )
        LLM_REQUEST_DURATION.labels(model=entry.model).observe(
            entry.latency_ms / 1000.0
        )

        if entry.success:
            logger.debug("llm_usage", **entry.to_dict())
        else:
            logger.warning("llm_usage", **entry.to_dict())

    @property
    def entries(self) -> List[UsageLogEntry]:
        """Snapshot of recorded entries, oldest first."""
        return list(self._entries)

    def last(self) -> Optional[UsageLogEntry]:
        return self._entries[-1] if self._entries else None

    def get_summary(self) -> dict:
        """Get current usage summary.

        Returns:
            Dictionary with totals and per-model aggregates
        """
        usages = list(self.by_model.values())
        return {
            "total_requests": sum(u.requests for u in usages),
            "successful_requests": sum(u.successful_requests for u in usages),
            "failed_requests": sum(u.failed_requests for u in usages),
            "total_input_tokens": sum(u.input_tokens for u in usages),
            "total_output_tokens": sum(u.output_tokens for u in usages),
            "by_model": {
                name: {
                    "requests": usage.requests,
                    "input_tokens": usage.input_tokens,
                    "output_tokens": usage.output_tokens,
                    "failed_requests": usage.failed_requests,
                }
                for name, usage in self.by_model.items()
            },
        }

    def clear(self) -> None:
        """Drop history and aggregates."""
        self._entries.clear()
        self.by_model.clear()
