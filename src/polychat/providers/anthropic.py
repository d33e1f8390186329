"""Anthropic Messages API adapter."""

from __future__ import annotations

import json
import logging
from typing import Any

from polychat import constants as c
from polychat.extraction import extract_final_text
from polychat.providers._utils import anthropic_web_search_tool, split_data_url
from polychat.providers.models import ChatTurn, ToolCall, ToolResult, WireRequest

logger = logging.getLogger(__name__)


class AnthropicAdapter:
    """Anthropic Messages API adapter.

    System turns in history move to the top-level ``system`` field, and
    tool results travel back as a *user* turn of ``tool_result`` blocks.
    """

    family = "anthropic"

    @staticmethod
    def _user_message(turn: ChatTurn) -> dict[str, Any] | None:
        """Build the current user turn; a vision turn is a single block list."""
        if turn.image:
            split = split_data_url(turn.image)
            if split is not None:
                media_type, data = split
                return {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": media_type,
                                "data": data,
                            },
                        },
                        {"type": "text", "text": turn.message},
                    ],
                }
            logger.warning("Dropping image that is not a base64 data URL")
        if turn.message:
            return {"role": "user", "content": turn.message}
        return None

    def build_request(self, turn: ChatTurn) -> WireRequest:
        """Build a Messages API body for *turn*."""
        messages: list[dict[str, Any]] = []
        system_parts: list[str] = []
        for item in turn.history:
            if item.role == "system":
                if item.content:
                    system_parts.append(item.content)
                continue
            role = "assistant" if item.role == "assistant" else "user"
            if item.content:
                _append_message(messages, {"role": role, "content": item.content})

        user_message = self._user_message(turn)
        if user_message is not None:
            _append_message(messages, user_message)

        body: dict[str, Any] = {
            "model": turn.model_id,
            "messages": messages,
            "max_tokens": c.DEFAULT_MAX_TOKENS,
        }
        if system_parts:
            body["system"] = "\n\n".join(system_parts)
        if turn.web_search:
            body["tools"] = [anthropic_web_search_tool()]
        return WireRequest(body=body, messages=messages)

    def extract_tool_calls(self, data: Any) -> list[ToolCall]:
        """Normalize ``tool_use`` content blocks, serializing ``input`` to JSON."""
        calls: list[ToolCall] = []
        for block in _content_blocks(data):
            if block.get("type") != "tool_use":
                continue
            calls.append(
                ToolCall(
                    id=str(block.get("id", "")),
                    name=str(block.get("name", "")),
                    arguments=json.dumps(block.get("input", {})),
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
        """Append the assistant tool_use turn and a user turn of tool results."""
        request = self.build_request(turn)

        assistant_blocks = [
            block
            for block in _content_blocks(first_response)
            if block.get("type") == "text"
        ]
        tool_use_blocks = [
            block
            for block in _content_blocks(first_response)
            if block.get("type") == "tool_use"
        ]
        if not tool_use_blocks:
            for call in tool_calls:
                try:
                    args = json.loads(call.arguments)
                except ValueError:
                    args = {}
                tool_use_blocks.append(
                    {"type": "tool_use", "id": call.id, "name": call.name, "input": args}
                )
        assistant_blocks.extend(tool_use_blocks)

        request.messages.append({"role": "assistant", "content": assistant_blocks})
        request.messages.append(
            {
                "role": "user",
                "content": [
                    {
                        "type": "tool_result",
                        "tool_use_id": result.tool_call_id,
                        "content": result.content,
                    }
                    for result in results
                ],
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


def _content_blocks(data: Any) -> list[dict[str, Any]]:
    if not isinstance(data, dict):
        return []
    content = data.get("content")
    if not isinstance(content, list):
        return []
    return [block for block in content if isinstance(block, dict)]


def _append_message(messages: list[dict[str, Any]], msg: dict[str, Any]) -> None:
    """Append *msg*, merging into the previous message when roles match.

    Anthropic requires strict user/assistant alternation, so consecutive
    same-role turns in history are folded into one block list.
    """
    if messages and messages[-1]["role"] == msg["role"]:
        prev = messages[-1]
        prev_content = prev["content"]
        new_content = msg["content"]
        if isinstance(prev_content, str):
            prev_content = [{"type": "text", "text": prev_content}]
        if isinstance(new_content, str):
            new_content = [{"type": "text", "text": new_content}]
        prev["content"] = prev_content + new_content
    else:
        messages.append(msg)
