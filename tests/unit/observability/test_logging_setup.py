"""Tests for structured logging setup."""

import structlog

from notes_ai.observability.context import clear_correlation_id, set_correlation_id
from notes_ai.observability.logging import (
    add_correlation_id_processor,
    add_service_context_processor,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    redact_secrets_processor,
)


class TestProcessors:
    """Tests for custom structlog processors."""

    def test_adds_correlation_id(self):
        set_correlation_id("req-1")
        result = add_correlation_id_processor(None, "info", {"event": "x"})
        assert result["correlation_id"] == "req-1"
        clear_correlation_id()

    def test_none_marker_when_unset(self):
        clear_correlation_id()
        result = add_correlation_id_processor(None, "info", {"event": "x"})
        assert result["correlation_id"] == "none"

    def test_service_context(self):
        processor = add_service_context_processor("tag_service")
        result = processor(None, "info", {"event": "x", "count": 3})

        assert result["component"] == "tag_service"
        assert result["count"] == 3


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_and_console(self):
        for json_output in (True, False):
            configure_logging(level="INFO", json_output=json_output)
            assert structlog.get_logger() is not None

    def test_all_levels(self):
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            configure_logging(level=level)
            assert structlog.get_logger() is not None

    def test_unknown_level_falls_back(self):
        configure_logging(level="VERBOSE")
        assert structlog.get_logger() is not None


class TestLoggerHelpers:
    """Tests for get_logger and context binding."""

    def setup_method(self):
        configure_logging(level="DEBUG", json_output=True)
        clear_context()

    def test_get_logger_with_component(self):
        logger = get_logger("llm_client", model="gemini-2.5-flash")
        assert hasattr(logger, "info")

    def test_bind_and_clear_context(self):
        bind_context(note_id="123")
        assert structlog.contextvars.get_contextvars() == {"note_id": "123"}

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestRedactSecrets:
    """Tests for API key redaction."""

    def test_api_key_cut(self):
        result = redact_secrets_processor(
            None, "info", {"event": "config_loaded", "api_key": "AIzaSyVerySecret"}
        )
        assert result["api_key"] == "AIzaSyVe..."

    def test_already_masked_unchanged(self):
        result = redact_secrets_processor(None, "info", {"api_key": "AIzaSyVe..."})
        assert result["api_key"] == "AIzaSyVe..."

    def test_other_fields_untouched(self):
        result = redact_secrets_processor(None, "info", {"model": "gemini-2.5-flash"})
        assert result == {"model": "gemini-2.5-flash"}
