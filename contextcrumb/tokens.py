"""Token counting and token-budget fitting."""

from __future__ import annotations

import functools
import math
from collections.abc import Callable, Sequence
from typing import TypeVar

import tiktoken

from contextcrumb.models import FitResult

T = TypeVar("T")

DEFAULT_ENCODING = "cl100k_base"
CHARS_PER_TOKEN = 4


@functools.cache
def _encoding(name: str = DEFAULT_ENCODING) -> tiktoken.Encoding:
    return tiktoken.get_encoding(name)


def count_tokens(text: str) -> int:
    """Count tokens in text with the cl100k_base encoding."""
    if not text:
        return 0
    return len(_encoding().encode(text, disallowed_special=()))


def estimate_tokens(text: str) -> int:
    """Cheap estimate of the token count from the character count."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def fit_to_budget(
    items: Sequence[T],
    render: Callable[[list[T]], str],
    max_tokens: int,
    *,
    count: Callable[[str], int] = count_tokens,
) -> FitResult[T]:
    """Find the longest prefix of items whose rendering fits the budget.

    Binary search over the prefix length, so ``render`` runs O(log n)
    times. The result is only guaranteed to be the longest fitting
    prefix when ``count(render(items[:k]))`` does not decrease as k
    grows.

    Args:
        items: Items in priority order, most important first.
        render: Turns a prefix of items into text.
        max_tokens: Token budget for the rendered text.
        count: Token counter.

    Returns:
        The best prefix with its rendering and token count; empty when
        items is empty or nothing fits.

    Raises:
        ValueError: If max_tokens is negative.
    """
    if max_tokens < 0:
        raise ValueError(f"max_tokens must be >= 0, got {max_tokens}")

    best: FitResult[T] = FitResult()
    if not items:
        return best

    lower, upper = 1, len(items)
    while lower <= upper:
        mid = (lower + upper) // 2
        subset = list(items[:mid])
        output = render(subset)
        tokens = count(output)

        if tokens <= max_tokens:
            if tokens > best.tokens_used or mid > best.items_included:
                best = FitResult(
                    items=subset,
                    output=output,
                    tokens_used=tokens,
                    items_included=mid,
                )
            lower = mid + 1
        else:
            upper = mid - 1

    return best


def fits_within_budget(
    text: str, max_tokens: int, *, count: Callable[[str], int] = count_tokens
) -> bool:
    return count(text) <= max_tokens


def remaining_budget(
    text: str, max_tokens: int, *, count: Callable[[str], int] = count_tokens
) -> int:
    """Tokens left after text; negative when text is over budget."""
    return max_tokens - count(text)


def budget_usage(tokens_used: int, max_tokens: int) -> float:
    """Percentage of the budget used, capped at 100."""
    if max_tokens <= 0:
        return 0.0
    return min(tokens_used / max_tokens * 100.0, 100.0)
