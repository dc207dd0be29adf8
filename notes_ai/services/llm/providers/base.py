"""Abstract LLM Provider Interface

This module defines:
- ProviderReply: raw reply from a single remote call
- LLMProvider: abstract base class for remote text generation
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ProviderReply:
    """Raw reply from one provider call.

    Attributes:
        text: The generated text (may be empty; the client rejects that)
        finish_reason: Why generation stopped, as reported by the provider
        usage: Provider-reported usage metadata, informational only
    """

    text: str
    finish_reason: Optional[str] = None
    usage: Optional[Any] = None


class LLMProvider(ABC):
    """Abstract base class for text generation providers.

    Implementations issue exactly one remote call per ``generate`` and
    raise whatever the transport raises; classification happens in the
    client.

    Implementations:
        - GoogleProvider: Gemini models
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'google')."""
        pass  # pragma: no cover - abstract method, always overridden

    @abstractmethod
    async def generate(
        self,
        model: str,
        prompt: str,
        max_output_tokens: int,
        temperature: float,
        top_p: float,
        top_k: int,
    ) -> ProviderReply:
        """Generate text from prompt.

        Args:
            model: Model identifier
            prompt: The input prompt, sent as-is
            max_output_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            top_p: Nucleus sampling threshold
            top_k: Top-k sampling size

        Returns:
            ProviderReply with the generated text
        """
        pass  # pragma: no cover - abstract method, always overridden
