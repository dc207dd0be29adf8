"""Error Classifier

Maps arbitrary exceptions raised while talking to the provider into the
closed LLMError taxonomy. Rules are evaluated in a fixed order and the
first match wins. The order matters: a message like "model token limit
exceeded" must hit the token-limit rule before the generic model rule.

1. "API key" in message, or status 401      -> API_KEY_INVALID
2. status 429, or "quota" in message         -> QUOTA_EXCEEDED
3. TimeoutError, or code "TIMEOUT"           -> TIMEOUT
4. "content" and "filter" in message         -> CONTENT_FILTERED
5. "token" and "limit" in message            -> TOKEN_LIMIT_EXCEEDED
6. status 404, or "model" in message         -> MODEL_NOT_FOUND
7. code ENOTFOUND / ECONNREFUSED             -> NETWORK_ERROR
8. anything else                             -> UNKNOWN
"""

import asyncio
import socket
from typing import Any, Iterator, Optional

from notes_ai.utils.exceptions import ErrorKind, LLMError

NETWORK_ERROR_CODES = frozenset({"ENOTFOUND", "ECONNREFUSED"})


def classify_error(error: Any) -> LLMError:
    """Classify a raw error into an LLMError.

    Pure and total: the same error shape always yields the same kind.
    Already-classified errors are returned unchanged.

    Args:
        error: Any exception (or exception-like object)

    Returns:
        LLMError carrying the matched ErrorKind and the original as cause
    """
    if isinstance(error, LLMError):
        return error

    message = _message(error)
    status = _status_code(error)
    code = _error_code(error)

    if "API key" in message or status == 401:
        return LLMError(ErrorKind.API_KEY_INVALID, "Invalid API key", error, status)

    if status == 429 or "quota" in message:
        return LLMError(ErrorKind.QUOTA_EXCEEDED, "API quota exceeded", error, status)

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)) or code == "TIMEOUT":
        return LLMError(ErrorKind.TIMEOUT, "Request timeout", error)

    if "content" in message and "filter" in message:
        return LLMError(ErrorKind.CONTENT_FILTERED, "Content filtered", error, status)

    if "token" in message and "limit" in message:
        return LLMError(
            ErrorKind.TOKEN_LIMIT_EXCEEDED, "Token limit exceeded", error, status
        )

    if status == 404 or "model" in message:
        return LLMError(ErrorKind.MODEL_NOT_FOUND, "Model not found", error, status)

    if code in NETWORK_ERROR_CODES:
        return LLMError(ErrorKind.NETWORK_ERROR, "Network error", error)

    return LLMError(ErrorKind.UNKNOWN, message or "Unknown error", error, status)


def is_non_retryable_error(error: Any) -> bool:
    """Return True if the error must not be retried."""
    return not classify_error(error).is_retryable


def _message(error: Any) -> str:
    return str(error) if error is not None else ""


def _status_code(error: Any) -> Optional[int]:
    """Read an integer HTTP status from common SDK attribute names.

    google-genai's APIError exposes the HTTP status as ``code`` and the
    textual status (e.g. "RESOURCE_EXHAUSTED") as ``status``.
    """
    for attr in ("status_code", "code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value

    response = getattr(error, "response", None)
    value = getattr(response, "status_code", None)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _error_code(error: Any) -> Optional[str]:
    """Resolve a symbolic error code (TIMEOUT, ENOTFOUND, ECONNREFUSED).

    SDKs wrap socket errors, so the cause chain is searched too.
    """
    code = getattr(error, "code", None)
    if isinstance(code, str):
        return code

    for exc in _iter_chain(error):
        if isinstance(exc, ConnectionRefusedError):
            return "ECONNREFUSED"
        if isinstance(exc, socket.gaierror):
            return "ENOTFOUND"
    return None


def _iter_chain(error: Any) -> Iterator[BaseException]:
    seen = set()
    current = error
    while isinstance(current, BaseException) and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__
