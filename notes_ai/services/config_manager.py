import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import structlog
from dotenv import load_dotenv
from pydantic import ValidationError

from notes_ai.models.llm import DEFAULT_MODEL, LLMConfig

logger = structlog.get_logger()

# Environment variable -> LLMConfig field
ENV_API_KEY = "GOOGLE_API_KEY"
ENV_MODEL = "GEMINI_MODEL"
ENV_MAX_TOKENS = "GEMINI_MAX_TOKENS"
ENV_TIMEOUT_MS = "GEMINI_TIMEOUT_MS"
ENV_DEBUG = "GEMINI_DEBUG"
ENV_RATE_LIMIT = "GEMINI_RATE_LIMIT"
ENV_APP_ENV = "APP_ENV"

ENV_FIELDS = {
    "max_tokens": ENV_MAX_TOKENS,
    "timeout_ms": ENV_TIMEOUT_MS,
    "rate_limit_per_minute": ENV_RATE_LIMIT,
}

OPTIONAL_DEFAULTS = {
    ENV_MODEL: DEFAULT_MODEL,
    ENV_MAX_TOKENS: "8192",
    ENV_TIMEOUT_MS: "10000",
}


class ConfigValidationError(Exception):
    """Configuration validation failed"""

    pass


@dataclass
class EnvironmentStatus:
    """Result of an environment setup check"""

    is_valid: bool
    missing_vars: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _environ(env: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    if env is not None:
        return env
    load_dotenv()
    return os.environ


def load_llm_config(env: Optional[Mapping[str, str]] = None) -> LLMConfig:
    """Load and validate the LLM configuration from the environment.

    Args:
        env: Mapping to read instead of ``os.environ`` (``.env`` is only
             loaded when reading the real environment)

    Returns:
        Validated LLMConfig

    Raises:
        ConfigValidationError: If a variable is missing, malformed or out
            of range
    """
    source = _environ(env)

    api_key = source.get(ENV_API_KEY)
    if not api_key:
        raise ConfigValidationError(
            f"{ENV_API_KEY} is required. Please set it in your environment variables."
        )

    data: Dict[str, Any] = {
        "api_key": api_key,
        "model": source.get(ENV_MODEL) or DEFAULT_MODEL,
        "debug": source.get(ENV_DEBUG, "").lower() == "true",
    }

    for field_name, var in ENV_FIELDS.items():
        raw = source.get(var)
        if not raw:
            continue
        try:
            data[field_name] = int(raw)
        except ValueError:
            raise ConfigValidationError(f"{var} must be an integer, got: {raw!r}")

    try:
        config = LLMConfig(**data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid LLM configuration: {e}")

    logger.info("config_loaded", **mask_config_for_logging(config))
    return config


def mask_config_for_logging(config: LLMConfig) -> Dict[str, Any]:
    """Config as a dict safe for logs (API key cut to 8 characters)."""
    data = config.model_dump()
    data["api_key"] = f"{config.api_key[:8]}..." if config.api_key else "NOT_SET"
    return data


def check_environment_setup(
    env: Optional[Mapping[str, str]] = None,
) -> EnvironmentStatus:
    """Report missing required variables and defaulted optional ones."""
    source = _environ(env)
    missing_vars: List[str] = []
    warnings: List[str] = []

    if not source.get(ENV_API_KEY):
        missing_vars.append(ENV_API_KEY)

    for var, default in OPTIONAL_DEFAULTS.items():
        if not source.get(var):
            warnings.append(f"{var} not set, using default: {default}")

    return EnvironmentStatus(
        is_valid=not missing_vars, missing_vars=missing_vars, warnings=warnings
    )


def is_development(env: Optional[Mapping[str, str]] = None) -> bool:
    return (env if env is not None else os.environ).get(ENV_APP_ENV) == "development"


def is_production(env: Optional[Mapping[str, str]] = None) -> bool:
    return (env if env is not None else os.environ).get(ENV_APP_ENV) == "production"


def is_debug_mode(env: Optional[Mapping[str, str]] = None) -> bool:
    return (env if env is not None else os.environ).get(ENV_DEBUG) == "true"


def get_log_level(env: Optional[Mapping[str, str]] = None) -> str:
    """Log level for the current environment (``.env`` included).

    Returns:
        "DEBUG" in development or debug mode, "WARNING" in production,
        "INFO" otherwise
    """
    source = _environ(env)
    if is_development(source) or is_debug_mode(source):
        return "DEBUG"
    if is_production(source):
        return "WARNING"
    return "INFO"
