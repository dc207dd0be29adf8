"""Tests for the LLM error taxonomy."""

import pytest

from notes_ai.utils.exceptions import (
    RETRYABLE_KINDS,
    USER_MESSAGES,
    ErrorKind,
    LLMError,
)


class TestErrorKind:
    """Tests for the closed ErrorKind set."""

    def test_exactly_nine_kinds(self):
        assert len(list(ErrorKind)) == 9

    def test_every_kind_has_user_message(self):
        assert set(USER_MESSAGES) == set(ErrorKind)

    def test_string_values(self):
        assert ErrorKind.TIMEOUT.value == "TIMEOUT"
        assert ErrorKind("QUOTA_EXCEEDED") is ErrorKind.QUOTA_EXCEEDED


class TestLLMError:
    """Tests for LLMError."""

    def test_basic_fields(self):
        cause = ValueError("boom")
        error = LLMError(ErrorKind.UNKNOWN, "Something failed", cause, 500)

        assert str(error) == "Something failed"
        assert error.message == "Something failed"
        assert error.cause is cause
        assert error.status_code == 500
        assert isinstance(error, Exception)

    @pytest.mark.parametrize(
        "kind",
        [ErrorKind.NETWORK_ERROR, ErrorKind.TIMEOUT, ErrorKind.QUOTA_EXCEEDED],
    )
    def test_retryable_kinds(self, kind):
        assert LLMError(kind, "x").is_retryable is True

    @pytest.mark.parametrize(
        "kind",
        [
            ErrorKind.API_KEY_INVALID,
            ErrorKind.CONTENT_FILTERED,
            ErrorKind.TOKEN_LIMIT_EXCEEDED,
            ErrorKind.MODEL_NOT_FOUND,
            ErrorKind.INVALID_INPUT,
            ErrorKind.UNKNOWN,
        ],
    )
    def test_terminal_kinds(self, kind):
        assert LLMError(kind, "x").is_retryable is False

    def test_retryable_set(self):
        assert RETRYABLE_KINDS == {
            ErrorKind.NETWORK_ERROR,
            ErrorKind.TIMEOUT,
            ErrorKind.QUOTA_EXCEEDED,
        }

    def test_user_message_does_not_echo_detail(self):
        error = LLMError(ErrorKind.API_KEY_INVALID, "key AIza-secret rejected")
        assert error.user_message == "API 키가 유효하지 않습니다. 설정을 확인해주세요."
        assert "AIza" not in error.user_message

    def test_unknown_user_message(self):
        error = LLMError(ErrorKind.UNKNOWN, "weird")
        assert error.user_message == "알 수 없는 오류가 발생했습니다. 다시 시도해주세요."

    def test_to_dict(self):
        error = LLMError(ErrorKind.QUOTA_EXCEEDED, "API quota exceeded", status_code=429)
        data = error.to_dict()

        assert data["kind"] == "QUOTA_EXCEEDED"
        assert data["retryable"] is True
        assert data["status_code"] == 429
        assert data["user_message"] == USER_MESSAGES[ErrorKind.QUOTA_EXCEEDED]
