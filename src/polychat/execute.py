"""Phase 2: Turn execution with at most one tool-result follow-up."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time
from typing import TYPE_CHECKING, Any

from polychat import constants as c
from polychat.providers import get_adapter
from polychat.search import WebSearchClient
from polychat.tokens import reconcile_token_usage
from polychat.tools import execute_tool_call
from polychat.transport import send_wire_request

if TYPE_CHECKING:
    import httpx

    from polychat.config import Config
    from polychat.providers.models import TokenUsage, ToolCall, ToolResult
    from polychat.request import PreparedTurn

logger = logging.getLogger(__name__)


@dataclass
class TurnTrace:
    """What happened while executing one chat turn."""

    text: str
    usage: TokenUsage
    used_web_search: bool = False
    responses: list[Any] = field(default_factory=list)
    tool_calls: list[ToolCall] = field(default_factory=list)
    tool_results: list[ToolResult] = field(default_factory=list)
    duration_s: float = 0.0


async def execute_turn(
    prepared: PreparedTurn,
    *,
    client: httpx.AsyncClient,
    config: Config,
) -> TurnTrace:
    """Run one chat turn against its provider.

    Sends the first request; when web search is enabled and the response asks
    for tool calls, executes them in order and sends a single follow-up that
    carries the results. Tool calls in the follow-up response are ignored.

    Raises:
        UpstreamTransportError: If either provider call fails.
    """
    start_time = time.perf_counter()
    turn = prepared.turn
    adapter = get_adapter(turn.provider)

    async def send(body: dict[str, Any]) -> Any:
        return await send_wire_request(
            client,
            adapter,
            provider=turn.provider,
            model_id=turn.model_id,
            endpoint=prepared.endpoint,
            api_key=prepared.api_key,
            header_template=prepared.header_template,
            body=body,
            timeout_s=config.request_timeout_s,
        )

    wire = adapter.build_request(turn)
    responses = [await send(wire.body)]
    final = responses[0]

    tool_calls: list[ToolCall] = []
    tool_results: list[ToolResult] = []
    if turn.web_search and c.MAX_FOLLOWUP_ROUNDS > 0:
        tool_calls = adapter.extract_tool_calls(final)
    if tool_calls:
        tool_results = await _run_tools(tool_calls, client, config)
        followup = adapter.build_followup(turn, final, tool_calls, tool_results)
        final = await send(followup.body)
        responses.append(final)
        ignored = adapter.extract_tool_calls(final)
        if ignored:
            logger.warning(
                "Ignoring %d tool call(s) in the follow-up response", len(ignored)
            )

    text = adapter.extract_text(final, prepared.response_path)
    usage = reconcile_token_usage(
        responses, input_text=prepared.input_text, output_text=text
    )
    used_web_search = bool(tool_calls) or (
        turn.web_search and turn.provider in c.NATIVE_SEARCH_PROVIDERS
    )
    return TurnTrace(
        text=text,
        usage=usage,
        used_web_search=used_web_search,
        responses=responses,
        tool_calls=tool_calls,
        tool_results=tool_results,
        duration_s=time.perf_counter() - start_time,
    )


async def _run_tools(
    tool_calls: list[ToolCall], client: httpx.AsyncClient, config: Config
) -> list[ToolResult]:
    search = WebSearchClient(client, config)
    # Sequential, in the order the provider returned them.
    return [await execute_tool_call(call, search) for call in tool_calls]
