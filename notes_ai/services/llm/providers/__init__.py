"""LLM Provider implementations."""

from notes_ai.services.llm.providers.base import LLMProvider, ProviderReply
from notes_ai.services.llm.providers.google import GoogleProvider

__all__ = [
    "LLMProvider",
    "ProviderReply",
    "GoogleProvider",
]
