"""Shared utilities for provider adapters."""

from __future__ import annotations

from copy import deepcopy
import re
from typing import Any

from polychat.constants import WEB_SEARCH_TOOL_NAME

_DATA_URL_RE = re.compile(r"^data:([^;]+);base64,(.+)$", re.DOTALL)

_WEB_SEARCH_DESCRIPTION = (
    "Search the web for current information. Use this when the user asks "
    "about recent events or facts you are unsure about."
)

_WEB_SEARCH_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "description": "The search query",
        }
    },
    "required": ["query"],
}


def split_data_url(data_url: str) -> tuple[str, str] | None:
    """Split ``data:<mime>;base64,<payload>`` into ``(mime, payload)``.

    Returns None when *data_url* is not a base64 data URL.
    """
    m = _DATA_URL_RE.match(data_url)
    if m is None:
        return None
    return m.group(1), m.group(2)


def function_web_search_tool() -> dict[str, Any]:
    """Return the OpenAI-style function tool declaration for web search."""
    return {
        "type": "function",
        "function": {
            "name": WEB_SEARCH_TOOL_NAME,
            "description": _WEB_SEARCH_DESCRIPTION,
            "parameters": deepcopy(_WEB_SEARCH_PARAMETERS),
        },
    }


def anthropic_web_search_tool() -> dict[str, Any]:
    """Return the Anthropic tool declaration (no function wrapper)."""
    return {
        "name": WEB_SEARCH_TOOL_NAME,
        "description": _WEB_SEARCH_DESCRIPTION,
        "input_schema": deepcopy(_WEB_SEARCH_PARAMETERS),
    }
