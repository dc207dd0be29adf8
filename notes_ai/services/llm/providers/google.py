"""Google (Gemini) Provider Implementation"""

from typing import Any, Optional

import structlog

from notes_ai.services.llm.providers.base import LLMProvider, ProviderReply
from notes_ai.utils.exceptions import ErrorKind, LLMError

logger = structlog.get_logger()


class GoogleProvider(LLMProvider):
    """Google Gemini provider backed by the google-genai SDK.

    Holds one long-lived ``genai.Client``. The client is bound to an API
    key, so a key change means building a new provider.
    """

    def __init__(self, api_key: str, debug: bool = False):
        """Initialize Google provider.

        Args:
            api_key: Google API key
            debug: Log reply metadata at debug level

        Raises:
            LLMError: If google-genai package is not installed
        """
        self._debug = debug
        self._client: Any = None

        try:
            from google import genai

            self._client = genai.Client(api_key=api_key)
        except ImportError:
            raise LLMError(
                ErrorKind.UNKNOWN,
                "google-genai package not installed. Run: pip install google-genai",
            )

    @property
    def name(self) -> str:
        """Provider name."""
        return "google"

    async def generate(
        self,
        model: str,
        prompt: str,
        max_output_tokens: int,
        temperature: float,
        top_p: float,
        top_k: int,
    ) -> ProviderReply:
        """Generate text using Gemini.

        Errors from the SDK propagate unchanged.
        """
        from google.genai import types

        response = await self._client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                max_output_tokens=max_output_tokens,
                temperature=temperature,
                top_p=top_p,
                top_k=top_k,
            ),
        )

        text = getattr(response, "text", None) or ""
        usage = getattr(response, "usage_metadata", None)
        finish_reason = self._get_finish_reason(response)

        if self._debug:
            logger.debug(
                "google_generate_response",
                model=model,
                has_text=bool(text),
                total_token_count=getattr(usage, "total_token_count", None),
                finish_reason=finish_reason,
            )

        return ProviderReply(text=text, finish_reason=finish_reason, usage=usage)

    def _get_finish_reason(self, response: Any) -> Optional[str]:
        """Extract finish reason from the first candidate."""
        candidates = getattr(response, "candidates", None)
        if candidates:
            reason = getattr(candidates[0], "finish_reason", None)
            if reason is not None:
                # FinishReason enum -> "STOP"
                return str(getattr(reason, "value", reason))
        return None
