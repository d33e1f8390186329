"""Tool-call execution for the ``web_search`` tool."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from polychat.constants import WEB_SEARCH_TOOL_NAME
from polychat.errors import SearchExecutionError, ToolArgumentParseError
from polychat.providers.models import ToolCall, ToolResult

if TYPE_CHECKING:
    from polychat.search import WebSearchClient

logger = logging.getLogger(__name__)


def parse_tool_arguments(arguments: str) -> dict[str, Any]:
    """Parse a JSON arguments string into a dict.

    Raises:
        ToolArgumentParseError: If *arguments* is not a JSON object.
    """
    try:
        parsed = json.loads(arguments)
    except (TypeError, ValueError) as e:
        raise ToolArgumentParseError(f"tool arguments are not JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ToolArgumentParseError(
            f"tool arguments must be a JSON object, got {type(parsed).__name__}"
        )
    return parsed


def search_query_from_arguments(arguments: str) -> str:
    """Return the search query from tool arguments.

    Uses ``query``, then ``q``, then the empty string. Arguments that do not
    parse are taken verbatim as the query.
    """
    try:
        args = parse_tool_arguments(arguments)
    except ToolArgumentParseError as e:
        logger.info("Using raw tool arguments as the search query: %s", e)
        return arguments
    query = args.get("query") or args.get("q") or ""
    return query if isinstance(query, str) else str(query)


async def execute_tool_call(call: ToolCall, search: WebSearchClient) -> ToolResult:
    """Execute one tool call. Never raises for tool-level failures."""
    if call.name != WEB_SEARCH_TOOL_NAME:
        logger.warning("Model requested unsupported tool %r", call.name)
        return ToolResult(
            tool_call_id=call.id,
            content=f"Error: unsupported tool {call.name!r}",
        )

    query = search_query_from_arguments(call.arguments)
    logger.info("Executing web search for tool call %s", call.id)
    try:
        content = await search.search(query)
    except SearchExecutionError as e:
        logger.warning("Web search failed for tool call %s: %s", call.id, e)
        content = f"Web search failed: {e}"
    return ToolResult(tool_call_id=call.id, content=content)
