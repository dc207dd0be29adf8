"""Prompt Builder Module

Builds the fixed-template prompts for the note AI features:
- Tag extraction (JSON array reply, bounded count)
- Bullet-point summaries

Note content is embedded verbatim after the instructions.
"""

import structlog

logger = structlog.get_logger()


class PromptBuilder:
    """Builds note-analysis prompts for the LLM.

    Templates are written in Korean so that the model replies with
    Korean tags and bullets, matching the notes' language.
    """

    def build_tag_prompt(self, content: str, max_tags: int) -> str:
        """Build the tag extraction prompt.

        Args:
            content: Note content (possibly truncated)
            max_tags: Exact maximum number of tags to request

        Returns:
            Formatted prompt string
        """
        prompt = f"""다음 노트 내용을 분석하여 관련성 높은 태그를 최대 {max_tags}개 생성해주세요.

요구사항:
1. 태그는 한국어로 작성
2. 각 태그는 2-10자 이내
3. 구체적이고 명확한 키워드 사용
4. 중복되지 않는 다양한 관점의 태그
5. JSON 배열 형태로 응답

노트 내용:
{content}

응답 형식:
["태그1", "태그2", "태그3"]"""

        logger.debug(
            "tag_prompt_built",
            max_tags=max_tags,
            prompt_length=len(prompt),
        )
        return prompt

    def build_summary_prompt(self, content: str) -> str:
        """Build the 3-6 bullet summary prompt.

        Args:
            content: Note content

        Returns:
            Formatted prompt string
        """
        return (
            "다음 노트 내용을 간결하게 3~6개의 불릿 포인트로 한국어로 요약하시오. "
            "각 불릿은 한 줄로 작성하고 불필요한 접두사는 제거하시오.\n\n"
            f"노트 내용:\n{content}"
        )
