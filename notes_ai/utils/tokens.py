"""Token estimation and truncation

The provider bills in subword tokens, but calling its tokenizer for every
pre-flight check costs a round trip. These helpers use a character-class
heuristic instead:
- Hangul syllables are dense (~0.67 characters per token)
- everything else is Latin-like (~4 characters per token)

The estimator is a strategy object so an exact tokenizer can be plugged
into the client and services without touching call sites.
"""

import math
import re
from abc import ABC, abstractmethod
from typing import Optional

# Hangul syllables block (가-힣)
DENSE_SCRIPT_PATTERN = re.compile(r"[가-힣]")
WHITESPACE_PATTERN = re.compile(r"\s")

# Headroom left after truncation to absorb estimation error
TRUNCATION_SAFETY_FACTOR = 0.9

DEFAULT_TOKEN_LIMIT = 8192
MAX_RESERVED_OUTPUT_TOKENS = 2000
RESERVED_OUTPUT_RATIO = 0.3


class TokenEstimator(ABC):
    """Maps text to an approximate token count."""

    @abstractmethod
    def estimate(self, text: str) -> int:
        """Return an estimated token count (>= 0)."""
        pass  # pragma: no cover - abstract method, always overridden


class HeuristicTokenEstimator(TokenEstimator):
    """Weighted character count, split by script density.

    Args:
        dense_weight: Tokens per dense-script character
        other_weight: Tokens per other character
    """

    def __init__(self, dense_weight: float = 1.5, other_weight: float = 0.25):
        self.dense_weight = dense_weight
        self.other_weight = other_weight

    def estimate(self, text: str) -> int:
        if not text:
            return 0
        dense_chars = len(DENSE_SCRIPT_PATTERN.findall(text))
        other_chars = len(text) - dense_chars
        return math.ceil(
            dense_chars * self.dense_weight + other_chars * self.other_weight
        )


DEFAULT_ESTIMATOR = HeuristicTokenEstimator()


def estimate_tokens(text: str, estimator: Optional[TokenEstimator] = None) -> int:
    """Estimate the token count of ``text``."""
    return (estimator or DEFAULT_ESTIMATOR).estimate(text)


def validate_token_limit(
    input_tokens: int, max_tokens: int = DEFAULT_TOKEN_LIMIT
) -> bool:
    """Check that input leaves room for the reply.

    Reserves 30% of the budget (capped at 2000 tokens) for output and
    always allows at least one input token.

    Args:
        input_tokens: Estimated input tokens
        max_tokens: Total token budget

    Returns:
        True if the input fits in the non-reserved part of the budget
    """
    reserved = min(MAX_RESERVED_OUTPUT_TOKENS, math.floor(max_tokens * RESERVED_OUTPUT_RATIO))
    allowed_input = max(1, max_tokens - reserved)
    return input_tokens <= allowed_input


def truncate_text(
    text: str,
    max_tokens: int,
    estimator: Optional[TokenEstimator] = None,
) -> str:
    """Cut ``text`` so its estimate fits in ``max_tokens``.

    The cut length is proportional to the over-budget ratio with a 10%
    safety margin, then backed off to the last whitespace so words are
    not split. The result is a heuristic fit, not a guarantee: text with
    dense characters concentrated at the start can still exceed the
    budget, and callers must re-check.

    Args:
        text: Original text (not modified)
        max_tokens: Token budget
        estimator: Optional estimator strategy

    Returns:
        The original text if it fits, otherwise a truncated prefix
    """
    estimated = estimate_tokens(text, estimator)
    if estimated <= max_tokens:
        return text

    ratio = max_tokens / estimated
    target_length = math.floor(len(text) * ratio * TRUNCATION_SAFETY_FACTOR)
    truncated = text[:target_length]

    last_space = _last_whitespace_index(truncated)
    return truncated[:last_space] if last_space > 0 else truncated


def _last_whitespace_index(text: str) -> int:
    index = -1
    for match in WHITESPACE_PATTERN.finditer(text):
        index = match.start()
    return index
