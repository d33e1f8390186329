"""Adapter protocol: the capability set every provider family implements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from polychat.providers.models import ChatTurn, ToolCall, ToolResult, WireRequest


@runtime_checkable
class ProviderAdapter(Protocol):
    """Translate canonical chat turns to and from one provider's wire format."""

    family: str

    def build_request(self, turn: ChatTurn) -> WireRequest:
        """Build the first request body for *turn*. Pure, no I/O."""
        ...

    def extract_tool_calls(self, data: Any) -> list[ToolCall]:
        """Return tool calls found in a raw response, or an empty list."""
        ...

    def build_followup(
        self,
        turn: ChatTurn,
        first_response: Any,
        tool_calls: list[ToolCall],
        results: list[ToolResult],
    ) -> WireRequest:
        """Build the second request that carries tool results back."""
        ...

    def extract_text(
        self, data: Any, response_path: str | None = None
    ) -> str:
        """Return the assistant text from a raw response."""
        ...

    def resolve_endpoint(
        self, endpoint: str, model_id: str, api_key: str
    ) -> tuple[str, dict[str, str]]:
        """Return the final URL and query parameters for a request."""
        ...
