"""Phase 3: Result envelope returned to callers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from polychat.pricing import CostBreakdown
    from polychat.providers.models import TokenUsage


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TokenUsageReport(_CamelModel):
    """Token counters and cost for one chat turn.

    ``is_estimated`` marks counts produced by the heuristic estimator, so
    cost accounting can flag them as approximate.
    """

    input_tokens: int
    output_tokens: int
    total_tokens: int
    estimated_cost: float
    is_estimated: bool


class ChatResult(_CamelModel):
    """Outcome of a chat turn.

    ``success`` is False only when the provider call itself failed; degraded
    search or extraction still yields a successful result.
    """

    success: bool
    response: str | None = None
    used_web_search: bool | None = None
    token_usage: TokenUsageReport | None = None
    error: str | None = None

    def to_wire(self) -> dict[str, Any]:
        """Dump with camelCase keys, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


def build_result(
    text: str,
    *,
    usage: TokenUsage,
    cost: CostBreakdown,
    used_web_search: bool,
) -> ChatResult:
    """Build a successful ChatResult."""
    return ChatResult(
        success=True,
        response=text,
        used_web_search=used_web_search,
        token_usage=TokenUsageReport(
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            total_tokens=usage.total_tokens,
            estimated_cost=cost.total_cost,
            is_estimated=usage.is_estimated,
        ),
    )


def error_result(message: str) -> ChatResult:
    """Build a failed ChatResult."""
    return ChatResult(success=False, error=message)
