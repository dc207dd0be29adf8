"""LLM Service Package

This package provides:
- LLMClient: resilient text generation orchestrator
- create_llm_client: composition-root factory (reads the environment)
- Provider implementations (Google Gemini)
- UsageRecorder for per-call accounting
- PromptBuilder and TagResponseParser for note features

Usage:
    from notes_ai.services.llm import create_llm_client

    client = create_llm_client()
    response = await client.generate_text("노트를 요약해주세요")
"""

from notes_ai.services.llm.client import LLMClient, create_llm_client
from notes_ai.services.llm.usage_recorder import UsageRecorder
from notes_ai.services.llm.prompt_builder import PromptBuilder
from notes_ai.services.llm.response_parser import TagResponseParser, TagParseResult
from notes_ai.services.llm.providers.base import LLMProvider, ProviderReply
from notes_ai.utils.error_classifier import classify_error, is_non_retryable_error
from notes_ai.utils.exceptions import ErrorKind, LLMError

__all__ = [
    # Main client
    "LLMClient",
    "create_llm_client",
    # Components
    "UsageRecorder",
    "PromptBuilder",
    "TagResponseParser",
    "TagParseResult",
    # Provider abstractions
    "LLMProvider",
    "ProviderReply",
    # Errors
    "ErrorKind",
    "LLMError",
    "classify_error",
    "is_non_retryable_error",
]
