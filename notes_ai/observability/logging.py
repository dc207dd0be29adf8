"""structlog setup for notes-ai.

Every entry carries the request's correlation id and the emitting
component, and never carries a raw API key. Output is one JSON object
per line on stderr (console rendering is available for local use).

    configure_logging(level=get_log_level())
    log = get_logger("tag_service", note_id="123")
    log.info("tags_generated", count=4)
"""

import logging
import sys
from typing import Any, Callable, List, Optional

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from notes_ai.observability.context import get_correlation_id

SECRET_FIELDS = frozenset({"api_key", "GOOGLE_API_KEY"})
VISIBLE_KEY_PREFIX = 8


def add_correlation_id_processor(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Stamp the entry with the current correlation id, or "none"."""
    event_dict["correlation_id"] = get_correlation_id() or "none"
    return event_dict


def redact_secrets_processor(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Cut API key values down to their first characters."""
    for key in SECRET_FIELDS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str) and not value.endswith("..."):
            event_dict[key] = f"{value[:VISIBLE_KEY_PREFIX]}..."
    return event_dict


def add_service_context_processor(component: str) -> Callable[..., EventDict]:
    """Processor factory: tag entries without a component with ``component``."""

    def processor(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("component", component)
        return event_dict

    return processor


def _shared_processors(service: Optional[str], add_timestamp: bool) -> List[Processor]:
    chain: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_correlation_id_processor,
        redact_secrets_processor,
        structlog.processors.add_log_level,
    ]
    if service:
        chain.append(add_service_context_processor(service))
    if add_timestamp:
        chain.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    chain.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]
    )
    return chain


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    add_timestamp: bool = True,
    service: Optional[str] = "notes-ai",
) -> None:
    """Install the structlog configuration.

    Args:
        level: Minimum level name; unknown names fall back to INFO
        json_output: JSON lines when True, colored console otherwise
        add_timestamp: Add a UTC ISO timestamp
        service: Default component for entries that do not set one
    """
    min_level = getattr(logging, level.upper(), logging.INFO)

    renderer: Processor
    if json_output:
        # Korean tags and messages stay readable in the log stream
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*_shared_processors(service, add_timestamp), renderer],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: Optional[str] = None, **initial_context: Any) -> Any:
    """Logger bound to ``component`` plus any extra key/values."""
    context = dict(initial_context)
    if component:
        context["component"] = component
    return structlog.get_logger().bind(**context)


def bind_context(**context: Any) -> None:
    """Attach key/values to every entry logged by the current task."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Drop task-bound key/values (call when a request finishes)."""
    structlog.contextvars.clear_contextvars()
