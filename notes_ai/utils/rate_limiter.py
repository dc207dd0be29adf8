"""Rate limit check

Only a threshold check: counting requests per window is left to the
caller (or a shared store such as Redis in a multi-process deployment).
"""

import structlog

logger = structlog.get_logger()

DEFAULT_WINDOW_MS = 60000


def check_rate_limit(
    current_usage: int, limit: int, window_ms: int = DEFAULT_WINDOW_MS
) -> bool:
    """Return True if ``current_usage`` is still under ``limit``.

    Args:
        current_usage: Requests already made in the current window
        limit: Allowed requests per window
        window_ms: Window length in milliseconds (informational)

    Returns:
        Whether another request is allowed
    """
    allowed = current_usage < limit
    if not allowed:
        logger.warning(
            "rate_limit_reached",
            current_usage=current_usage,
            limit=limit,
            window_ms=window_ms,
        )
    return allowed
