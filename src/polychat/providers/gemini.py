"""Google Gemini ``generateContent`` adapter."""

from __future__ import annotations

import logging
from typing import Any

from polychat import constants as c
from polychat._http import MODEL_ID_PLACEHOLDER
from polychat.extraction import extract_final_text
from polychat.providers._utils import split_data_url
from polychat.providers.models import ChatTurn, ToolCall, ToolResult, WireRequest

logger = logging.getLogger(__name__)


class GeminiAdapter:
    """Gemini adapter.

    Web search is Google's native grounding, so responses never carry tool
    calls for the caller to execute.
    """

    family = "google"

    @staticmethod
    def _user_parts(turn: ChatTurn) -> list[dict[str, Any]]:
        parts: list[dict[str, Any]] = []
        if turn.message:
            parts.append({"text": turn.message})
        if turn.image:
            split = split_data_url(turn.image)
            if split is None:
                logger.warning("Dropping image that is not a base64 data URL")
            else:
                mime_type, data = split
                parts.append({"inline_data": {"mime_type": mime_type, "data": data}})
        return parts

    def build_request(self, turn: ChatTurn) -> WireRequest:
        """Build a ``generateContent`` body for *turn*."""
        contents: list[dict[str, Any]] = [
            {
                "role": "model" if item.role == "assistant" else "user",
                "parts": [{"text": item.content}],
            }
            for item in turn.history
        ]
        user_parts = self._user_parts(turn)
        if user_parts:
            contents.append({"role": "user", "parts": user_parts})

        generation_config: dict[str, Any] = {
            "temperature": c.DEFAULT_TEMPERATURE,
            "maxOutputTokens": c.DEFAULT_MAX_TOKENS,
        }
        body: dict[str, Any] = {
            "contents": contents,
            "generationConfig": generation_config,
        }
        if turn.web_search:
            body["tools"] = [{"google_search": {}}]
            generation_config["enable_grounding"] = True
        return WireRequest(body=body, messages=contents)

    def extract_tool_calls(self, data: Any) -> list[ToolCall]:
        _ = data
        return []

    def build_followup(
        self,
        turn: ChatTurn,
        first_response: Any,
        tool_calls: list[ToolCall],
        results: list[ToolResult],
    ) -> WireRequest:
        """Gemini never asks for tool execution; resend the original turn."""
        _ = first_response, tool_calls, results
        return self.build_request(turn)

    def extract_text(
        self, data: Any, response_path: str | None = None
    ) -> str:
        return extract_final_text(data, response_path)

    def resolve_endpoint(
        self, endpoint: str, model_id: str, api_key: str
    ) -> tuple[str, dict[str, str]]:
        """Substitute the model id and pass the key as a query parameter."""
        return endpoint.replace(MODEL_ID_PLACEHOLDER, model_id), {"key": api_key}
