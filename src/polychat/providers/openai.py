"""OpenAI-compatible chat completions adapters.

Covers OpenAI itself, the providers that mirror its ``/chat/completions``
shape (DeepSeek, xAI, Perplexity AI, Mistral AI, Moonshot AI), Zhipu AI, and
the default adapter used for unrecognized providers.
"""

from __future__ import annotations

import json
from typing import Any

from polychat import constants as c
from polychat.extraction import extract_final_text
from polychat.providers._utils import function_web_search_tool
from polychat.providers.models import ChatTurn, ToolCall, ToolResult, WireRequest


class OpenAICompatibleAdapter:
    """Flat ``messages`` array with function tools."""

    family = "openai"

    def _user_content(self, turn: ChatTurn) -> str | list[dict[str, Any]]:
        if not turn.image:
            return turn.message
        # The data URL is passed through verbatim.
        return [
            {"type": "text", "text": turn.message},
            {"type": "image_url", "image_url": {"url": turn.image}},
        ]

    def _model_id(self, turn: ChatTurn) -> str:
        return turn.model_id

    def _tools(self, turn: ChatTurn) -> list[dict[str, Any]] | None:
        if turn.web_search:
            return [function_web_search_tool()]
        return None

    def build_request(self, turn: ChatTurn) -> WireRequest:
        """Build a ``/chat/completions`` body for *turn*."""
        messages: list[dict[str, Any]] = [
            {"role": item.role, "content": item.content} for item in turn.history
        ]
        if turn.message or turn.image:
            messages.append({"role": "user", "content": self._user_content(turn)})

        body: dict[str, Any] = {
            "model": self._model_id(turn),
            "messages": messages,
            "temperature": c.DEFAULT_TEMPERATURE,
            "max_tokens": c.DEFAULT_MAX_TOKENS,
        }
        tools = self._tools(turn)
        if tools:
            body["tools"] = tools
        return WireRequest(body=body, messages=messages)

    def extract_tool_calls(self, data: Any) -> list[ToolCall]:
        """Read ``choices[0].message.tool_calls``."""
        raw_calls = _raw_tool_calls(data)
        calls: list[ToolCall] = []
        for raw in raw_calls:
            function = raw.get("function")
            if not isinstance(function, dict):
                continue
            arguments = function.get("arguments")
            if not isinstance(arguments, str):
                arguments = json.dumps(arguments if arguments is not None else {})
            calls.append(
                ToolCall(
                    id=str(raw.get("id", "")),
                    name=str(function.get("name", "")),
                    arguments=arguments,
                )
            )
        return calls

    def build_followup(
        self,
        turn: ChatTurn,
        first_response: Any,
        tool_calls: list[ToolCall],
        results: list[ToolResult],
    ) -> WireRequest:
        """Append the assistant tool_calls turn and one tool message per result."""
        request = self.build_request(turn)
        original = _raw_tool_calls(first_response)
        if not original:
            original = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": call.arguments},
                }
                for call in tool_calls
            ]
        request.messages.append(
            {"role": "assistant", "content": None, "tool_calls": original}
        )
        for result in results:
            request.messages.append(
                {
                    "role": "tool",
                    "tool_call_id": result.tool_call_id,
                    "name": c.WEB_SEARCH_TOOL_NAME,
                    "content": result.content,
                }
            )
        return request

    def extract_text(
        self, data: Any, response_path: str | None = None
    ) -> str:
        return extract_final_text(data, response_path)

    def resolve_endpoint(
        self, endpoint: str, model_id: str, api_key: str
    ) -> tuple[str, dict[str, str]]:
        _ = model_id, api_key
        return endpoint, {}


class OpenAIAdapter(OpenAICompatibleAdapter):
    """OpenAI signals web search through the model id, not a tool."""

    def _model_id(self, turn: ChatTurn) -> str:
        model_id = turn.model_id
        if turn.web_search and not model_id.endswith(c.OPENAI_SEARCH_MODEL_SUFFIX):
            return model_id + c.OPENAI_SEARCH_MODEL_SUFFIX
        return model_id

    def _tools(self, turn: ChatTurn) -> list[dict[str, Any]] | None:
        _ = turn
        return None


class ZhipuAdapter(OpenAICompatibleAdapter):
    """Zhipu AI declares its built-in web search as a dedicated tool type."""

    def _tools(self, turn: ChatTurn) -> list[dict[str, Any]] | None:
        if turn.web_search:
            return [{"type": "web_search", "web_search": {}}]
        return None


class DefaultAdapter(OpenAICompatibleAdapter):
    """Fallback for providers outside the known set."""

    family = "default"

    def _tools(self, turn: ChatTurn) -> list[dict[str, Any]] | None:
        if turn.web_search and turn.provider not in c.NATIVE_SEARCH_PROVIDERS:
            return [function_web_search_tool()]
        return None


def _raw_tool_calls(data: Any) -> list[dict[str, Any]]:
    if not isinstance(data, dict):
        return []
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return []
    first = choices[0]
    if not isinstance(first, dict):
        return []
    message = first.get("message")
    if not isinstance(message, dict):
        return []
    tool_calls = message.get("tool_calls")
    if not isinstance(tool_calls, list):
        return []
    return [tc for tc in tool_calls if isinstance(tc, dict)]
