"""Tests for environment-backed configuration."""

import os
from unittest.mock import patch

import pytest

from notes_ai.models.llm import DEFAULT_MODEL, LLMConfig
from notes_ai.services.config_manager import (
    ConfigValidationError,
    check_environment_setup,
    get_log_level,
    is_debug_mode,
    is_development,
    is_production,
    load_llm_config,
    mask_config_for_logging,
)


class TestLoadLLMConfig:
    """Tests for load_llm_config."""

    def test_defaults(self):
        config = load_llm_config({"GOOGLE_API_KEY": "AIza-test-key-123"})

        assert config.api_key == "AIza-test-key-123"
        assert config.model == DEFAULT_MODEL
        assert config.max_tokens == 8192
        assert config.timeout_ms == 10000
        assert config.debug is False
        assert config.rate_limit_per_minute == 60

    def test_all_variables(self):
        config = load_llm_config(
            {
                "GOOGLE_API_KEY": "AIza-test-key-123",
                "GEMINI_MODEL": "gemini-2.0-flash-001",
                "GEMINI_MAX_TOKENS": "4096",
                "GEMINI_TIMEOUT_MS": "30000",
                "GEMINI_DEBUG": "true",
                "GEMINI_RATE_LIMIT": "120",
            }
        )

        assert config.model == "gemini-2.0-flash-001"
        assert config.max_tokens == 4096
        assert config.timeout_ms == 30000
        assert config.debug is True
        assert config.rate_limit_per_minute == 120

    def test_missing_key(self):
        with pytest.raises(ConfigValidationError, match="GOOGLE_API_KEY is required"):
            load_llm_config({})

    def test_non_integer(self):
        with pytest.raises(ConfigValidationError, match="GEMINI_MAX_TOKENS"):
            load_llm_config({"GOOGLE_API_KEY": "k-123", "GEMINI_MAX_TOKENS": "lots"})

    @pytest.mark.parametrize(
        "var,value",
        [
            ("GEMINI_MAX_TOKENS", "0"),
            ("GEMINI_MAX_TOKENS", "40000"),
            ("GEMINI_TIMEOUT_MS", "60001"),
            ("GEMINI_RATE_LIMIT", "5000"),
        ],
    )
    def test_out_of_range(self, var, value):
        with pytest.raises(ConfigValidationError):
            load_llm_config({"GOOGLE_API_KEY": "k-123", var: value})

    def test_debug_only_true(self):
        config = load_llm_config({"GOOGLE_API_KEY": "k-123", "GEMINI_DEBUG": "yes"})
        assert config.debug is False


class TestMaskConfig:
    """Tests for log masking."""

    def test_masks_key(self):
        data = mask_config_for_logging(LLMConfig(api_key="AIzaSyVerySecretValue"))

        assert data["api_key"] == "AIzaSyVe..."
        assert "VerySecretValue" not in str(data)
        assert data["max_tokens"] == 8192


class TestCheckEnvironmentSetup:
    """Tests for check_environment_setup."""

    def test_missing_key(self):
        status = check_environment_setup({})

        assert status.is_valid is False
        assert status.missing_vars == ["GOOGLE_API_KEY"]
        assert len(status.warnings) == 3

    def test_complete(self):
        status = check_environment_setup(
            {
                "GOOGLE_API_KEY": "k",
                "GEMINI_MODEL": "m",
                "GEMINI_MAX_TOKENS": "100",
                "GEMINI_TIMEOUT_MS": "100",
            }
        )

        assert status.is_valid is True
        assert status.missing_vars == []
        assert status.warnings == []


class TestEnvironmentHelpers:
    """Tests for environment mode helpers."""

    def test_modes(self):
        assert is_development({"APP_ENV": "development"}) is True
        assert is_production({"APP_ENV": "production"}) is True
        assert is_production({}) is False
        assert is_debug_mode({"GEMINI_DEBUG": "true"}) is True

    @pytest.mark.parametrize(
        "env,level",
        [
            ({"APP_ENV": "development"}, "DEBUG"),
            ({"GEMINI_DEBUG": "true", "APP_ENV": "production"}, "DEBUG"),
            ({"APP_ENV": "production"}, "WARNING"),
            ({}, "INFO"),
        ],
    )
    def test_log_level(self, env, level):
        assert get_log_level(env) == level

    def test_log_level_reads_dotenv(self):
        def fake_load_dotenv():
            os.environ["APP_ENV"] = "production"

        with patch.dict(os.environ, {}, clear=True):
            with patch(
                "notes_ai.services.config_manager.load_dotenv",
                side_effect=fake_load_dotenv,
            ) as load_dotenv:
                assert get_log_level() == "WARNING"

        load_dotenv.assert_called_once()

    def test_explicit_env_skips_dotenv(self):
        with patch("notes_ai.services.config_manager.load_dotenv") as load_dotenv:
            assert get_log_level({}) == "INFO"

        load_dotenv.assert_not_called()
