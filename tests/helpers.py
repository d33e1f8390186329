"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: every test that talks "HTTP" goes
through ``ScriptedTransport`` so no suite grows its own mock server.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any

import httpx

Reply = dict[str, Any] | httpx.Response | BaseException


@dataclass
class ScriptedTransport:
    """httpx handler that replays scripted replies per host.

    Each host has its own queue. A dict becomes a 200 JSON response, an
    ``httpx.Response`` is returned as-is, and an exception is raised.
    Every request is recorded for assertions.
    """

    script: dict[str, list[Reply]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.script.get(request.url.host)
        if not queue:
            raise AssertionError(f"unexpected request to {request.url}")
        item = queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def requests_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def bodies_to(self, host: str) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests_to(host)]


def openai_reply(
    content: str | None = "ok",
    *,
    tool_calls: list[dict[str, Any]] | None = None,
    usage: dict[str, int] | None = None,
) -> dict[str, Any]:
    """Build a chat-completions response."""
    message: dict[str, Any] = {"role": "assistant", "content": content}
    if tool_calls is not None:
        message["tool_calls"] = tool_calls
    data: dict[str, Any] = {"choices": [{"index": 0, "message": message}]}
    if usage is not None:
        data["usage"] = usage
    return data


def openai_tool_call(
    call_id: str = "call_1", arguments: str = '{"query": "weather"}'
) -> dict[str, Any]:
    return {
        "id": call_id,
        "type": "function",
        "function": {"name": "web_search", "arguments": arguments},
    }


def anthropic_reply(
    *blocks: dict[str, Any], usage: dict[str, int] | None = None
) -> dict[str, Any]:
    """Build a Messages API response from content blocks."""
    data: dict[str, Any] = {"role": "assistant", "content": list(blocks)}
    if usage is not None:
        data["usage"] = usage
    return data


def gemini_reply(text: str, *, usage: dict[str, int] | None = None) -> dict[str, Any]:
    data: dict[str, Any] = {
        "candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]
    }
    if usage is not None:
        data["usageMetadata"] = usage
    return data
