"""Token accounting: provider-reported counters with a heuristic fallback."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from polychat.providers.models import TokenUsage

if TYPE_CHECKING:
    from collections.abc import Iterable

# (container key, input counter, output counter), checked in order.
_USAGE_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("usage", "prompt_tokens", "completion_tokens"),
    ("usage", "input_tokens", "output_tokens"),
    ("usageMetadata", "promptTokenCount", "candidatesTokenCount"),
)


def estimate_token_count(text: str) -> int:
    """Estimate tokens from character and word counts.

    Averages ~4 characters per token with ~0.75 tokens per word and rounds
    up, so any non-blank text counts as at least one token.
    """
    cleaned = text.strip() if text else ""
    if not cleaned:
        return 0
    by_chars = len(cleaned) / 4
    by_words = len(cleaned.split()) * 0.75
    return math.ceil((by_chars + by_words) / 2)


def _as_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value >= 0:
        return int(value)
    return None


def reported_usage(data: Any) -> tuple[int, int] | None:
    """Return ``(input, output)`` counters reported by a provider, if any."""
    if not isinstance(data, dict):
        return None
    for container_key, in_key, out_key in _USAGE_FIELDS:
        container = data.get(container_key)
        if not isinstance(container, dict):
            continue
        input_tokens = _as_count(container.get(in_key))
        output_tokens = _as_count(container.get(out_key))
        if input_tokens is None and output_tokens is None:
            continue
        return input_tokens or 0, output_tokens or 0
    return None


def reconcile_token_usage(
    responses: Iterable[Any],
    *,
    input_text: str = "",
    output_text: str = "",
) -> TokenUsage:
    """Sum reported usage across responses, or estimate when none reported.

    Args:
        responses: Raw provider responses from the turn (first and follow-up).
        input_text: Concatenated history and current message, used only for
            estimation.
        output_text: Extracted final assistant text, used only for estimation.
    """
    input_total = 0
    output_total = 0
    reported = False
    for data in responses:
        counts = reported_usage(data)
        if counts is None:
            continue
        reported = True
        input_total += counts[0]
        output_total += counts[1]

    if reported:
        return TokenUsage(input_tokens=input_total, output_tokens=output_total)

    return TokenUsage(
        input_tokens=estimate_token_count(input_text),
        output_tokens=estimate_token_count(output_text),
        is_estimated=True,
    )
