"""LLM Error Taxonomy

Every failure that leaves the LLM layer is an LLMError tagged with one
ErrorKind from a closed set:
- API_KEY_INVALID: credential rejected (terminal)
- QUOTA_EXCEEDED: rate limit or quota hit (retryable)
- TIMEOUT: attempt exceeded its deadline (retryable)
- CONTENT_FILTERED: blocked by safety filters (terminal)
- NETWORK_ERROR: host unreachable or connection refused (retryable)
- TOKEN_LIMIT_EXCEEDED: input does not fit the budget (terminal)
- MODEL_NOT_FOUND: unknown or unavailable model (terminal)
- INVALID_INPUT: caller input rejected before any remote call (terminal)
- UNKNOWN: anything else (terminal)

The diagnostic ``message`` may carry internal detail for logs; the
``user_message`` is a fixed localized string per kind.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Closed set of LLM failure kinds."""

    API_KEY_INVALID = "API_KEY_INVALID"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    TIMEOUT = "TIMEOUT"
    CONTENT_FILTERED = "CONTENT_FILTERED"
    NETWORK_ERROR = "NETWORK_ERROR"
    TOKEN_LIMIT_EXCEEDED = "TOKEN_LIMIT_EXCEEDED"
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    INVALID_INPUT = "INVALID_INPUT"
    UNKNOWN = "UNKNOWN"


RETRYABLE_KINDS = frozenset(
    {ErrorKind.NETWORK_ERROR, ErrorKind.TIMEOUT, ErrorKind.QUOTA_EXCEEDED}
)

USER_MESSAGES = {
    ErrorKind.API_KEY_INVALID: "API 키가 유효하지 않습니다. 설정을 확인해주세요.",
    ErrorKind.QUOTA_EXCEEDED: "API 사용량 한도를 초과했습니다. 잠시 후 다시 시도해주세요.",
    ErrorKind.TIMEOUT: "요청 시간이 초과되었습니다. 다시 시도해주세요.",
    ErrorKind.CONTENT_FILTERED: "콘텐츠가 필터링되었습니다. 다른 내용으로 시도해주세요.",
    ErrorKind.TOKEN_LIMIT_EXCEEDED: "텍스트가 너무 깁니다. 더 짧은 내용으로 시도해주세요.",
    ErrorKind.MODEL_NOT_FOUND: "요청한 AI 모델을 찾을 수 없습니다.",
    ErrorKind.NETWORK_ERROR: "네트워크 연결에 문제가 있습니다. 연결을 확인해주세요.",
    ErrorKind.INVALID_INPUT: "입력 내용이 올바르지 않습니다. 내용을 확인해주세요.",
    ErrorKind.UNKNOWN: "알 수 없는 오류가 발생했습니다. 다시 시도해주세요.",
}


class LLMError(Exception):
    """Classified LLM error.

    Attributes:
        kind: The ErrorKind this error belongs to
        message: Diagnostic message (for logs, not for end users)
        cause: The wrapped original exception, if any
        status_code: Provider HTTP status code, if known
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        cause: Optional[Any] = None,
        status_code: Optional[int] = None,
    ):
        self.kind = kind
        self.message = message
        self.cause = cause
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """Whether the retry executor may re-attempt after this error."""
        return self.kind in RETRYABLE_KINDS

    @property
    def user_message(self) -> str:
        """Localized message safe to show to end users."""
        return USER_MESSAGES[self.kind]

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "user_message": self.user_message,
            "retryable": self.is_retryable,
            "status_code": self.status_code,
        }

    def __repr__(self) -> str:
        return f"LLMError(kind={self.kind.value}, message={self.message!r})"
