"""Usage log records and the recorder protocol.

Recording is the caller's concern: adapters never touch storage. ``chat()``
hands a ``TokenUsageLog`` to whatever recorder the caller passes, such as a
thin wrapper around a document-store collection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from polychat.pricing import CostBreakdown
    from polychat.providers.models import TokenUsage
    from polychat.request import PreparedTurn
    from polychat.templates import ProviderTemplate


@dataclass(frozen=True)
class TokenUsageLog:
    """Permanent record of one successful chat turn."""

    user_id: str
    model_id: str
    model_name: str
    provider: str
    input_tokens: int
    output_tokens: int
    total_tokens: int
    input_cost: float
    output_cost: float
    total_cost: float
    is_estimated: bool
    prompt_length: int
    response_length: int
    had_image: bool
    session_id: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@runtime_checkable
class UsageRecorder(Protocol):
    """Sink for usage logs."""

    async def record(self, log: TokenUsageLog) -> None:
        """Persist *log*."""
        ...


@dataclass
class InMemoryUsageRecorder:
    """Recorder that keeps logs in a list."""

    logs: list[TokenUsageLog] = field(default_factory=list)

    async def record(self, log: TokenUsageLog) -> None:
        self.logs.append(log)

    @property
    def total_cost(self) -> float:
        return sum(log.total_cost for log in self.logs)


def build_usage_log(
    prepared: PreparedTurn,
    *,
    response_text: str,
    usage: TokenUsage,
    cost: CostBreakdown,
    user_id: str,
    session_id: str | None = None,
    template: ProviderTemplate | None = None,
) -> TokenUsageLog:
    """Assemble a TokenUsageLog for a finished turn."""
    turn = prepared.turn
    model_name = turn.model_id
    if template is not None:
        known = template.find_model(turn.model_id)
        if known is not None:
            model_name = known.name
    return TokenUsageLog(
        user_id=user_id,
        model_id=turn.model_id,
        model_name=model_name,
        provider=turn.provider,
        input_tokens=usage.input_tokens,
        output_tokens=usage.output_tokens,
        total_tokens=usage.total_tokens,
        input_cost=cost.input_cost,
        output_cost=cost.output_cost,
        total_cost=cost.total_cost,
        is_estimated=usage.is_estimated,
        prompt_length=len(turn.message),
        response_length=len(response_text),
        had_image=bool(turn.image),
        session_id=session_id,
    )
