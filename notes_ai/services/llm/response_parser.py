"""Tag Response Parser

Parses free-form model replies into a bounded tag list in two stages:
1. Structured: the first ``[...]`` span, decoded as a JSON array
2. Fallback: one tag per line, JSON artifacts and long lines dropped

Malformed output is a soft failure: the worst case is an empty list,
never an exception.
"""

import json
import re
from dataclasses import dataclass, field
from typing import List, Literal, Optional

import structlog

logger = structlog.get_logger()

# First bracketed span, non-greedy so trailing prose is ignored
JSON_ARRAY_PATTERN = re.compile(r"\[([\s\S]*?)\]")

MAX_LINE_TAG_LENGTH = 10
QUOTE_CHARS = "\"'"

ParseStrategy = Literal["json", "lines", "failed"]


@dataclass
class TagParseResult:
    """Parsed tags plus the strategy that produced them."""

    tags: List[str] = field(default_factory=list)
    strategy: ParseStrategy = "failed"


class TagResponseParser:
    """Turns a model reply into at most ``max_tags`` tags."""

    def parse(self, text: str, max_tags: int) -> TagParseResult:
        """Parse a tag reply.

        Args:
            text: Raw model reply
            max_tags: Maximum number of tags to return

        Returns:
            TagParseResult; ``strategy="failed"`` with no tags if parsing
            raised unexpectedly
        """
        try:
            tags = self._parse_json_array(text, max_tags)
            if tags is not None:
                return TagParseResult(tags=tags, strategy="json")
            return TagParseResult(
                tags=self._parse_lines(text, max_tags), strategy="lines"
            )
        except Exception as e:
            logger.warning("tag_response_parse_failed", error=str(e))
            return TagParseResult(tags=[], strategy="failed")

    def _parse_json_array(self, text: str, max_tags: int) -> Optional[List[str]]:
        """Stage 1. Returns None when the reply holds no usable JSON array."""
        match = JSON_ARRAY_PATTERN.search(text)
        if not match:
            return None

        try:
            parsed = json.loads(f"[{match.group(1)}]")
        except json.JSONDecodeError:
            logger.debug("tag_response_not_json", snippet=match.group(0)[:200])
            return None

        if not isinstance(parsed, list):  # pragma: no cover - always a list
            return None

        tags = [
            item.strip()
            for item in parsed
            if isinstance(item, str) and item.strip()
        ]
        return tags[:max_tags]

    def _parse_lines(self, text: str, max_tags: int) -> List[str]:
        """Stage 2. One candidate tag per line."""
        tags: List[str] = []

        for line in text.split("\n"):
            clean_line = line.strip()
            if not clean_line or clean_line.startswith(("[", "]")):
                continue

            tag = self._strip_quotes(clean_line).strip()
            if tag and len(tag) <= MAX_LINE_TAG_LENGTH:
                tags.append(tag)
                if len(tags) >= max_tags:
                    break

        return tags

    @staticmethod
    def _strip_quotes(value: str) -> str:
        """Remove one leading and one trailing quote character."""
        if value and value[0] in QUOTE_CHARS:
            value = value[1:]
        if value and value[-1] in QUOTE_CHARS:
            value = value[:-1]
        return value
