"""Tag generation for notes.

Extracts a short list of keyword tags from note content with one LLM
call. Hard provider failures propagate as LLMError; an unparsable reply
degrades to an empty tag list.
"""

from typing import Optional, Union

import structlog

from notes_ai.models.llm import (
    DEFAULT_TAG_MODEL,
    GenerateTagsRequest,
    GenerateTextRequest,
    TagGenerationResult,
)
from notes_ai.observability.metrics import TAGS_GENERATED_TOTAL
from notes_ai.services.llm.client import LLMClient
from notes_ai.services.llm.prompt_builder import PromptBuilder
from notes_ai.services.llm.response_parser import TagResponseParser
from notes_ai.utils.exceptions import ErrorKind, LLMError
from notes_ai.utils.tokens import TokenEstimator, estimate_tokens, truncate_text

logger = structlog.get_logger()

MIN_CONTENT_LENGTH = 100
# Low temperature keeps tags stable across regenerations
TAG_TEMPERATURE = 0.3


class TagGenerationService:
    """Generates tags for a note through an LLMClient."""

    def __init__(
        self,
        client: LLMClient,
        estimator: Optional[TokenEstimator] = None,
        default_model: str = DEFAULT_TAG_MODEL,
        prompt_builder: Optional[PromptBuilder] = None,
        parser: Optional[TagResponseParser] = None,
    ):
        self._client = client
        self._estimator = estimator or client.estimator
        self._default_model = default_model
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._parser = parser or TagResponseParser()

    async def generate_tags(
        self, request: Union[GenerateTagsRequest, str]
    ) -> TagGenerationResult:
        """Generate tags from note content.

        Args:
            request: Tag request, or the note content with default options

        Returns:
            TagGenerationResult with 0..max_tags tags

        Raises:
            LLMError: INVALID_INPUT for content under 100 characters,
                TOKEN_LIMIT_EXCEEDED if the content cannot be made to fit,
                or any classified error from the client
        """
        if isinstance(request, str):
            request = GenerateTagsRequest(content=request)

        content = request.content
        if not content or len(content.strip()) < MIN_CONTENT_LENGTH:
            raise LLMError(
                ErrorKind.INVALID_INPUT,
                f"content too short: at least {MIN_CONTENT_LENGTH} characters required",
            )

        content = self._fit_to_budget(content, request.max_tokens, request.max_tags)
        prompt = self._prompt_builder.build_tag_prompt(content, request.max_tags)

        try:
            response = await self._client.generate_text(
                GenerateTextRequest(
                    prompt=prompt,
                    model=request.model or self._default_model,
                    max_tokens=request.max_tokens,
                    temperature=TAG_TEMPERATURE,
                )
            )
        except LLMError:
            raise
        except Exception as e:
            raise LLMError(
                ErrorKind.UNKNOWN, f"Tag generation failed: {e}", e
            ) from e

        parsed = self._parser.parse(response.text, request.max_tags)
        TAGS_GENERATED_TOTAL.labels(strategy=parsed.strategy).inc()

        logger.info(
            "tags_generated",
            count=len(parsed.tags),
            strategy=parsed.strategy,
            model=response.model,
        )

        return TagGenerationResult(
            tags=parsed.tags,
            model=response.model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            finish_reason=response.finish_reason,
        )

    def _fit_to_budget(self, content: str, max_tokens: int, max_tags: int) -> str:
        """Cut content so content plus the prompt template fits ``max_tokens``.

        Only the content is ever cut; the template, including its
        reply-format lines, is always sent whole.
        """
        template_tokens = estimate_tokens(
            self._prompt_builder.build_tag_prompt("", max_tags), self._estimator
        )
        content_budget = max_tokens - template_tokens
        tokens = estimate_tokens(content, self._estimator)
        if tokens <= content_budget:
            return content

        if content_budget < 1:
            raise LLMError(
                ErrorKind.TOKEN_LIMIT_EXCEEDED,
                f"Tag prompt template ({template_tokens} tokens) leaves no room "
                f"for content within limit ({max_tokens})",
            )

        truncated = truncate_text(content, content_budget, self._estimator)
        if estimate_tokens(truncated, self._estimator) > content_budget:
            raise LLMError(
                ErrorKind.TOKEN_LIMIT_EXCEEDED,
                f"Note content tokens ({tokens}) exceed limit ({content_budget})",
            )

        logger.info(
            "tag_content_truncated",
            original_tokens=tokens,
            content_budget=content_budget,
            max_tokens=max_tokens,
        )
        return truncated
