"""Bullet-point summaries for notes."""

from typing import Optional

import structlog

from notes_ai.models.llm import GenerateTextRequest, SummaryResult
from notes_ai.services.llm.client import LLMClient
from notes_ai.services.llm.prompt_builder import PromptBuilder
from notes_ai.utils.exceptions import ErrorKind, LLMError

logger = structlog.get_logger()

# Summaries are short; cap output instead of using the client default
SUMMARY_MAX_TOKENS = 512
SUMMARY_TEMPERATURE = 0.4


class SummaryService:
    """Summarizes a note into 3-6 one-line bullets.

    The reply is returned verbatim; storing it (one summary per note) is
    the caller's job.
    """

    def __init__(self, client: LLMClient, prompt_builder: Optional[PromptBuilder] = None):
        self._client = client
        self._prompt_builder = prompt_builder or PromptBuilder()

    async def generate_summary(self, content: str) -> SummaryResult:
        """Summarize note content.

        Raises:
            LLMError: Classified client errors, or UNKNOWN for anything else
        """
        prompt = self._prompt_builder.build_summary_prompt(content or "")

        try:
            response = await self._client.generate_text(
                GenerateTextRequest(
                    prompt=prompt,
                    max_tokens=SUMMARY_MAX_TOKENS,
                    temperature=SUMMARY_TEMPERATURE,
                )
            )
        except LLMError:
            raise
        except Exception as e:
            raise LLMError(
                ErrorKind.UNKNOWN, f"Summary generation failed: {e}", e
            ) from e

        logger.info(
            "summary_generated",
            model=response.model,
            summary_length=len(response.text),
        )

        return SummaryResult(
            summary=response.text,
            model=response.model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            finish_reason=response.finish_reason,
        )
