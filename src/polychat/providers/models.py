"""Domain models for the provider adapter layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class HistoryMessage:
    """A prior conversation turn."""

    role: str
    content: str


@dataclass(frozen=True)
class ChatTurn:
    """A canonical chat turn, independent of any provider's wire format."""

    provider: str
    model_id: str
    message: str = ""
    image: str | None = None
    history: tuple[HistoryMessage, ...] = ()
    web_search: bool = False


@dataclass(frozen=True)
class ToolCall:
    """A tool call requested by the model.

    ``arguments`` is always a JSON string, whatever the provider sent.
    """

    id: str
    name: str
    arguments: str


@dataclass(frozen=True)
class ToolResult:
    """Output of an executed tool call."""

    tool_call_id: str
    content: str


@dataclass
class WireRequest:
    """A provider-specific request body.

    ``messages`` is the same list object the body refers to, so appending to
    it updates the body in place.
    """

    body: dict[str, Any]
    messages: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class TokenUsage:
    """Token counters for one chat turn."""

    input_tokens: int = 0
    output_tokens: int = 0
    is_estimated: bool = False

    @property
    def total_tokens(self) -> int:
        """Input plus output tokens."""
        return self.input_tokens + self.output_tokens
