"""Tests for note tag generation."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from notes_ai.models.llm import (
    DEFAULT_TAG_MODEL,
    GenerateTagsRequest,
    GenerateTextResponse,
    LLMConfig,
    RetryConfig,
)
from notes_ai.services.llm.client import LLMClient
from notes_ai.services.llm.providers.base import ProviderReply
from notes_ai.services.tag_service import TagGenerationService
from notes_ai.utils.exceptions import ErrorKind, LLMError
from notes_ai.utils.tokens import HeuristicTokenEstimator, estimate_tokens

NOTE_CONTENT = "파이썬으로 웹 애플리케이션을 개발하는 방법을 정리한 노트입니다. " * 5


@pytest.fixture
def provider():
    mock = MagicMock()
    mock.name = "mock"
    mock.generate = AsyncMock(
        return_value=ProviderReply(text='["개발", "프로그래밍", "코딩", "테스트"]')
    )
    return mock


@pytest.fixture
def service(provider):
    client = LLMClient(
        LLMConfig(api_key="test-api-key-123456"),
        provider=provider,
        retry_config=RetryConfig(max_retries=3, backoff_ms=0),
    )
    return TagGenerationService(client)


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.estimator = HeuristicTokenEstimator()
    client.generate_text = AsyncMock(
        return_value=GenerateTextResponse(
            text='["개발"]', model=DEFAULT_TAG_MODEL, input_tokens=100, output_tokens=3
        )
    )
    return client


class TestGenerateTags:
    """Tests for successful tag generation."""

    @pytest.mark.asyncio
    async def test_json_reply(self, service):
        result = await service.generate_tags(
            GenerateTagsRequest(content=NOTE_CONTENT, max_tags=4)
        )

        assert result.tags == ["개발", "프로그래밍", "코딩", "테스트"]
        assert result.model == DEFAULT_TAG_MODEL
        assert result.input_tokens > 0
        assert result.finish_reason == "stop"

    @pytest.mark.asyncio
    async def test_accepts_bare_content(self, service):
        result = await service.generate_tags(NOTE_CONTENT)
        assert len(result.tags) == 4

    @pytest.mark.asyncio
    async def test_call_parameters(self, service, provider):
        await service.generate_tags(GenerateTagsRequest(content=NOTE_CONTENT, max_tags=3))

        kwargs = provider.generate.await_args.kwargs
        assert kwargs["model"] == DEFAULT_TAG_MODEL
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_output_tokens"] == 2000
        assert "최대 3개" in kwargs["prompt"]
        assert NOTE_CONTENT in kwargs["prompt"]

    @pytest.mark.asyncio
    async def test_model_override(self, service, provider):
        await service.generate_tags(
            GenerateTagsRequest(content=NOTE_CONTENT, model="gemini-2.5-flash")
        )
        assert provider.generate.await_args.kwargs["model"] == "gemini-2.5-flash"

    @pytest.mark.asyncio
    async def test_max_tags_respected(self, service, provider):
        provider.generate.return_value = ProviderReply(
            text='["a", "b", "c", "d", "e", "f", "g"]'
        )

        result = await service.generate_tags(
            GenerateTagsRequest(content=NOTE_CONTENT, max_tags=2)
        )

        assert result.tags == ["a", "b"]

    @pytest.mark.asyncio
    async def test_line_fallback(self, service, provider):
        provider.generate.return_value = ProviderReply(text="개발\n프로그래밍\n코딩")

        result = await service.generate_tags(NOTE_CONTENT)

        assert result.tags == ["개발", "프로그래밍", "코딩"]

    @pytest.mark.asyncio
    async def test_line_fallback_drops_long_lines(self, service, provider):
        provider.generate.return_value = ProviderReply(
            text="개발\n아주아주아주긴태그이름입니다\n코딩"
        )

        result = await service.generate_tags(NOTE_CONTENT)

        assert result.tags == ["개발", "코딩"]

    @pytest.mark.asyncio
    async def test_unparsable_reply_gives_empty_tags(self, service, provider):
        provider.generate.return_value = ProviderReply(text="[\n]")

        result = await service.generate_tags(NOTE_CONTENT)

        assert result.tags == []


class TestValidation:
    """Tests for input validation and budget."""

    @pytest.mark.asyncio
    async def test_short_content_rejected(self, service, provider):
        with pytest.raises(LLMError) as exc_info:
            await service.generate_tags("짧은 노트")

        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        provider.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_whitespace_does_not_count(self, service, provider):
        with pytest.raises(LLMError) as exc_info:
            await service.generate_tags(" " * 200 + "abc" + "\n" * 50)

        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        provider.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_exactly_minimum_length_accepted(self, service):
        result = await service.generate_tags("a" * 100)
        assert result.tags

    @pytest.mark.asyncio
    async def test_unfittable_content(self, service, provider):
        content = "가" * 10 + "a" * 1000

        with pytest.raises(LLMError) as exc_info:
            await service.generate_tags(GenerateTagsRequest(content=content, max_tokens=20))

        assert exc_info.value.kind == ErrorKind.TOKEN_LIMIT_EXCEEDED
        provider.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_long_content_truncated(self, mock_client):
        content = "note " * 1000  # 1250 estimated tokens
        service = TagGenerationService(mock_client)

        await service.generate_tags(GenerateTagsRequest(content=content, max_tokens=600))

        request = mock_client.generate_text.await_args.args[0]
        assert content not in request.prompt
        assert "note note" in request.prompt
        assert request.max_tokens == 600
        assert estimate_tokens(request.prompt) <= 600

    @pytest.mark.asyncio
    async def test_content_near_limit_keeps_reply_format(self, service, provider):
        content = "word " * 1580  # 1975 estimated tokens, template on top

        await service.generate_tags(content)

        sent = provider.generate.await_args.kwargs["prompt"]
        assert sent.endswith('["태그1", "태그2", "태그3"]')
        assert "word word" in sent
        assert estimate_tokens(sent) <= 2000

    @pytest.mark.asyncio
    async def test_template_alone_over_budget(self, service, provider):
        with pytest.raises(LLMError) as exc_info:
            await service.generate_tags(
                GenerateTagsRequest(content=NOTE_CONTENT, max_tokens=50)
            )

        assert exc_info.value.kind == ErrorKind.TOKEN_LIMIT_EXCEEDED
        provider.generate.assert_not_called()


class TestErrors:
    """Tests for error propagation."""

    @pytest.mark.asyncio
    async def test_llm_errors_propagate(self, service, provider):
        provider.generate.side_effect = Exception("API key not valid")

        with pytest.raises(LLMError) as exc_info:
            await service.generate_tags(NOTE_CONTENT)

        assert exc_info.value.kind == ErrorKind.API_KEY_INVALID

    @pytest.mark.asyncio
    async def test_other_errors_wrapped(self, mock_client):
        mock_client.generate_text.side_effect = ValueError("boom")
        service = TagGenerationService(mock_client)

        with pytest.raises(LLMError) as exc_info:
            await service.generate_tags(NOTE_CONTENT)

        assert exc_info.value.kind == ErrorKind.UNKNOWN
        assert exc_info.value.message == "Tag generation failed: boom"
