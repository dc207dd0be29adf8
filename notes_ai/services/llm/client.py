"""LLM Client - Main Orchestrator

Turns the remote Gemini API into a dependable internal primitive by
composing:
- TokenEstimator / truncate_text for the pre-flight budget check
- RetryHandler (outer) and with_timeout (per attempt) for resilience
- classify_error so callers only ever see LLMError
- UsageRecorder for per-call accounting

Higher-level features (tags, summaries) are thin consumers of
``generate_text``. The client has no module-level instance: build one
with ``create_llm_client()`` at the composition root and pass it down.
"""

import time
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

import structlog
from pydantic import ValidationError

from notes_ai.models.llm import (
    GenerateTextRequest,
    GenerateTextResponse,
    HealthCheckResult,
    LLMConfig,
    RetryConfig,
    UsageLogEntry,
)
from notes_ai.services.config_manager import (
    ConfigValidationError,
    load_llm_config,
    mask_config_for_logging,
)
from notes_ai.services.llm.providers.base import LLMProvider, ProviderReply
from notes_ai.services.llm.providers.google import GoogleProvider
from notes_ai.services.llm.usage_recorder import UsageRecorder
from notes_ai.utils.error_classifier import classify_error
from notes_ai.utils.exceptions import ErrorKind, LLMError
from notes_ai.utils.rate_limiter import check_rate_limit
from notes_ai.utils.retry import RetryHandler
from notes_ai.utils.timeout import with_timeout
from notes_ai.utils.tokens import (
    TokenEstimator,
    HeuristicTokenEstimator,
    truncate_text,
    validate_token_limit,
)

from notes_ai.observability.metrics import LLM_ERRORS_TOTAL

logger = structlog.get_logger()

DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 0.9
DEFAULT_TOP_K = 40

HEALTH_CHECK_PROMPT = "Hello"
HEALTH_CHECK_MAX_TOKENS = 10

ProviderFactory = Callable[[LLMConfig], LLMProvider]


def google_provider_factory(config: LLMConfig) -> LLMProvider:
    return GoogleProvider(api_key=config.api_key, debug=config.debug)


class LLMClient:
    """Resilient text generation client.

    Concurrent calls are safe: a call reads the config and provider once
    at its start, so ``update_config`` during an in-flight call only
    affects later calls.
    """

    def __init__(
        self,
        config: LLMConfig,
        provider: Optional[LLMProvider] = None,
        provider_factory: ProviderFactory = google_provider_factory,
        usage_recorder: Optional[UsageRecorder] = None,
        estimator: Optional[TokenEstimator] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        """Initialize the client.

        Args:
            config: Validated client configuration
            provider: Pre-built provider (tests inject mocks here)
            provider_factory: Builds a provider from config; used at
                construction when ``provider`` is None and again whenever
                the API key changes
            usage_recorder: Usage sink (a fresh one if None)
            estimator: Token estimation strategy (heuristic if None)
            retry_config: Retry policy (3 attempts, 1000ms if None)
        """
        self._config = config
        self._provider_factory = provider_factory
        self._provider = provider or provider_factory(config)
        self._usage_recorder = usage_recorder or UsageRecorder()
        self._estimator = estimator or HeuristicTokenEstimator()
        self._retry_handler = RetryHandler(retry_config)

        logger.info(
            "llm_client_initialized",
            provider=self._provider.name,
            model=config.model,
            max_tokens=config.max_tokens,
            timeout_ms=config.timeout_ms,
        )

    @property
    def config(self) -> LLMConfig:
        return self._config

    @property
    def usage_recorder(self) -> UsageRecorder:
        return self._usage_recorder

    @property
    def estimator(self) -> TokenEstimator:
        return self._estimator

    async def generate_text(
        self, request: Union[GenerateTextRequest, str]
    ) -> GenerateTextResponse:
        """Generate text for a prompt.

        Args:
            request: The request, or a bare prompt string

        Returns:
            GenerateTextResponse with estimated token counts

        Raises:
            LLMError: Always classified; raw provider errors never escape
        """
        if isinstance(request, str):
            request = GenerateTextRequest(prompt=request)

        config = self._config
        provider = self._provider
        model = request.model or config.model
        start_time = time.time()
        input_tokens = self.estimate_tokens(request.prompt)

        try:
            request = self._fit_to_budget(request, input_tokens, config)

            async def attempt() -> ProviderReply:
                return await with_timeout(
                    lambda: self._call_remote(provider, config, request),
                    config.timeout_ms,
                )

            reply = await self._retry_handler.execute(attempt)

        except Exception as e:
            error = classify_error(e)
            self._record_usage(
                model=model,
                input_tokens=input_tokens,
                output_tokens=0,
                start_time=start_time,
                error=error,
            )
            LLM_ERRORS_TOTAL.labels(kind=error.kind.value).inc()
            if config.debug:
                logger.debug(
                    "generate_text_failed",
                    model=model,
                    error_kind=error.kind.value,
                    error=error.message,
                )
            if error is e:
                raise
            raise error from e

        output_tokens = self.estimate_tokens(reply.text)
        self._record_usage(
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            start_time=start_time,
        )

        return GenerateTextResponse(
            text=reply.text,
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            finish_reason=reply.finish_reason or "stop",
        )

    def _fit_to_budget(
        self,
        request: GenerateTextRequest,
        input_tokens: int,
        config: LLMConfig,
    ) -> GenerateTextRequest:
        """Truncate an over-budget prompt, or fail without a remote call.

        Returns a derived copy; the caller's request is never modified.
        """
        effective_max = request.max_tokens or config.max_tokens
        if input_tokens <= effective_max:
            return request

        truncated = self.truncate_to_token_limit(request.prompt, effective_max)
        truncated_tokens = self.estimate_tokens(truncated)
        if truncated_tokens > effective_max:
            raise LLMError(
                ErrorKind.TOKEN_LIMIT_EXCEEDED,
                f"Input tokens ({input_tokens}) exceed limit ({effective_max})",
            )

        logger.info(
            "prompt_truncated",
            original_tokens=input_tokens,
            truncated_tokens=truncated_tokens,
            max_tokens=effective_max,
        )
        return request.model_copy(update={"prompt": truncated})

    async def _call_remote(
        self,
        provider: LLMProvider,
        config: LLMConfig,
        request: GenerateTextRequest,
    ) -> ProviderReply:
        """Issue one provider call. An empty reply counts as a failure."""
        temperature = (
            request.temperature
            if request.temperature is not None
            else DEFAULT_TEMPERATURE
        )
        reply = await provider.generate(
            model=request.model or config.model,
            prompt=request.prompt,
            max_output_tokens=request.max_tokens or config.max_tokens,
            temperature=temperature,
            top_p=DEFAULT_TOP_P,
            top_k=DEFAULT_TOP_K,
        )

        if not reply.text:
            raise LLMError(ErrorKind.UNKNOWN, "Empty response from Gemini API")

        return reply

    def _record_usage(
        self,
        model: str,
        input_tokens: int,
        output_tokens: int,
        start_time: float,
        error: Optional[LLMError] = None,
    ) -> None:
        self._usage_recorder.record(
            UsageLogEntry(
                timestamp=datetime.utcnow(),
                model=model,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                latency_ms=(time.time() - start_time) * 1000,
                success=error is None,
                error=error.message if error else None,
            )
        )

    async def health_check(self) -> bool:
        """Return True if a minimal generation succeeds."""
        result = await self.health_check_detailed()
        return result.success

    async def health_check_detailed(self) -> HealthCheckResult:
        """Run a minimal generation and report the outcome.

        Never raises: failures are returned as ``success=False``.
        """
        start_time = time.time()

        try:
            response = await self.generate_text(
                GenerateTextRequest(
                    prompt=HEALTH_CHECK_PROMPT, max_tokens=HEALTH_CHECK_MAX_TOKENS
                )
            )
        except Exception as e:
            error = classify_error(e)
            latency_ms = (time.time() - start_time) * 1000
            logger.warning(
                "health_check_failed",
                latency_ms=latency_ms,
                error_kind=error.kind.value,
                error=error.message,
            )
            return HealthCheckResult(
                success=False, latency_ms=latency_ms, error=error.message
            )

        latency_ms = (time.time() - start_time) * 1000
        logger.info(
            "health_check_passed",
            latency_ms=latency_ms,
            response_length=len(response.text),
        )
        return HealthCheckResult(success=True, latency_ms=latency_ms)

    def estimate_tokens(self, text: str) -> int:
        return self._estimator.estimate(text)

    def validate_token_limit(
        self, input_tokens: int, max_tokens: Optional[int] = None
    ) -> bool:
        return validate_token_limit(input_tokens, max_tokens or self._config.max_tokens)

    def truncate_to_token_limit(
        self, text: str, max_tokens: Optional[int] = None
    ) -> str:
        return truncate_text(
            text, max_tokens or self._config.max_tokens, self._estimator
        )

    def check_rate_limit(self, current_usage: int) -> bool:
        """Check ``current_usage`` against the per-minute limit."""
        return check_rate_limit(current_usage, self._config.rate_limit_per_minute)

    def get_config(self) -> Dict[str, Any]:
        """Current configuration with the API key masked."""
        return mask_config_for_logging(self._config)

    def update_config(self, **changes: Any) -> LLMConfig:
        """Merge ``changes`` into the configuration.

        The merged config is re-validated. A changed API key rebuilds the
        provider before the next call; other fields apply on the next call.

        Raises:
            LLMError: INVALID_INPUT if a field name is unknown or the merged
                config is invalid
        """
        unknown = sorted(set(changes) - set(LLMConfig.model_fields))
        if unknown:
            raise LLMError(
                ErrorKind.INVALID_INPUT,
                f"Unknown configuration fields: {', '.join(unknown)}",
            )

        try:
            new_config = LLMConfig(**{**self._config.model_dump(), **changes})
        except ValidationError as e:
            raise LLMError(
                ErrorKind.INVALID_INPUT, f"Invalid configuration update: {e}", e
            ) from e

        key_changed = new_config.api_key != self._config.api_key
        if key_changed:
            self._provider = self._provider_factory(new_config)
        self._config = new_config

        logger.info(
            "llm_config_updated",
            fields=sorted(changes),
            provider_rebuilt=key_changed,
        )
        return new_config


def create_llm_client(
    provider: Optional[LLMProvider] = None,
    **overrides: Any,
) -> LLMClient:
    """Build a client from the environment.

    Args:
        provider: Optional provider to use instead of Gemini
        **overrides: LLMConfig fields that take precedence over the
            environment

    Returns:
        A new LLMClient

    Raises:
        ConfigValidationError: If the environment configuration is invalid
    """
    config = load_llm_config()
    if overrides:
        unknown = sorted(set(overrides) - set(LLMConfig.model_fields))
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}"
            )
        try:
            config = LLMConfig(**{**config.model_dump(), **overrides})
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid LLM configuration: {e}")
    return LLMClient(config, provider=provider)
