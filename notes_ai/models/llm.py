"""LLM data models for the notes AI layer

This module defines the data structures for:
- Gemini client configuration (loaded from the environment)
- Retry configuration for transient failures
- Text generation requests and responses
- Usage log entries and health check results
- Tag generation and summary requests/results
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Bounds enforced at construction time
MAX_TOKENS_LIMIT = 32768
MAX_TIMEOUT_MS = 60000
MAX_RATE_LIMIT_PER_MINUTE = 1000

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TAG_MODEL = "gemini-2.0-flash-001"


class RetryConfig(BaseModel):
    """Configuration for retry logic with linear backoff

    The delay before retry N (1-indexed) is ``backoff_ms * N``.
    """

    max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum attempts, including the first one",
    )
    backoff_ms: int = Field(
        default=1000,
        ge=0,
        le=60000,
        description="Base backoff in milliseconds, multiplied by attempt number",
    )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={"example": {"max_retries": 3, "backoff_ms": 1000}},
    )


class LLMConfig(BaseModel):
    """Gemini client configuration

    Loaded once from the environment. Instances are immutable; the client
    replaces its config wholesale in ``update_config``.

    Security Note:
    - API keys must be loaded from environment variables
    - Never hardcode API keys in configuration files
    """

    api_key: str = Field(
        ..., description="API key (from environment variable)", min_length=1
    )
    model: str = Field(default=DEFAULT_MODEL, description="Model identifier")
    max_tokens: int = Field(
        default=8192,
        ge=1,
        le=MAX_TOKENS_LIMIT,
        description="Maximum tokens per request",
    )
    timeout_ms: int = Field(
        default=10000,
        ge=1,
        le=MAX_TIMEOUT_MS,
        description="Per-attempt request timeout in milliseconds",
    )
    debug: bool = Field(default=False, description="Verbose request logging")
    rate_limit_per_minute: int = Field(
        default=60,
        ge=1,
        le=MAX_RATE_LIMIT_PER_MINUTE,
        description="Allowed requests per minute",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Security: Ensure API key is not placeholder"""
        if v.strip() in ["YOUR_API_KEY", "PLACEHOLDER", "", "None"]:
            raise ValueError(
                "API key must be a valid credential from environment variable"
            )
        return v

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "api_key": "AIza...",
                "model": DEFAULT_MODEL,
                "max_tokens": 8192,
                "timeout_ms": 10000,
                "debug": False,
                "rate_limit_per_minute": 60,
            }
        },
    )


class GenerateTextRequest(BaseModel):
    """Text generation request. The prompt belongs to the caller."""

    prompt: str
    model: Optional[str] = None
    max_tokens: Optional[int] = Field(default=None, ge=1)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)


class GenerateTextResponse(BaseModel):
    """Text generation response.

    Token counts are heuristic estimates for both directions, not the
    provider-reported usage.
    """

    text: str
    model: str
    input_tokens: int
    output_tokens: int
    finish_reason: str = "stop"

    @property
    def total_tokens(self) -> int:
        """Total tokens used (input + output)."""
        return self.input_tokens + self.output_tokens


@dataclass
class UsageLogEntry:
    """A single API call record. Append-only, never persisted."""

    timestamp: datetime
    model: str
    input_tokens: int
    output_tokens: int
    latency_ms: float
    success: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "model": self.model,
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "latency_ms": round(self.latency_ms, 2),
            "success": self.success,
            "error": self.error,
        }


class HealthCheckResult(BaseModel):
    """Outcome of a detailed health check. Never raised, always returned."""

    success: bool
    latency_ms: float
    error: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class GenerateTagsRequest(BaseModel):
    """Request to extract tags from note content."""

    content: str
    max_tags: int = Field(default=6, ge=1, le=50)
    model: Optional[str] = None
    max_tokens: int = Field(default=2000, ge=1, le=MAX_TOKENS_LIMIT)


class TagGenerationResult(BaseModel):
    """Tags extracted from a note, in reply order (duplicates kept)."""

    tags: List[str] = Field(default_factory=list)
    model: str
    input_tokens: int
    output_tokens: int
    finish_reason: str


class SummaryResult(BaseModel):
    """Bullet-point summary of a note, stored verbatim by the caller."""

    summary: str
    model: str
    input_tokens: int
    output_tokens: int
    finish_reason: str
