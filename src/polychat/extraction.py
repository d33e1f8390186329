"""Assistant-text extraction from raw provider responses.

Response paths use a deliberately small grammar::

    path    := segment ("." segment)*
    segment := name ("[" index "]")*
    name    := one or more characters other than ".", "[" and "]"
    index   := non-negative integer

``choices[0].message.content`` and ``candidates[0].content.parts[0].text``
are typical values. A segment may also be a bare index (``[0].text``) when
the response itself is a list.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from polychat._http import truncate
from polychat.errors import ResponseShapeMismatch

logger = logging.getLogger(__name__)

_SEGMENT_RE = re.compile(r"^([^.\[\]]*)((?:\[\d+\])*)$")
_INDEX_RE = re.compile(r"\[(\d+)\]")

_MISSING = object()


def parse_response_path(path: str) -> list[str | int]:
    """Parse *path* into a list of field names and list indices.

    Raises:
        ValueError: If *path* does not follow the documented grammar.
    """
    steps: list[str | int] = []
    if not path or not path.strip():
        raise ValueError("response path is empty")

    for raw in path.strip().split("."):
        m = _SEGMENT_RE.match(raw)
        if m is None or (not m.group(1) and not m.group(2)):
            raise ValueError(f"invalid response path segment {raw!r} in {path!r}")
        if m.group(1):
            steps.append(m.group(1))
        steps.extend(int(i) for i in _INDEX_RE.findall(m.group(2)))
    return steps


def resolve_path(data: Any, path: str) -> Any:
    """Resolve *path* against *data*.

    Returns None when any segment is missing, has the wrong container type,
    or *path* is malformed.
    """
    try:
        steps = parse_response_path(path)
    except ValueError as e:
        logger.warning("Ignoring response path: %s", e)
        return None

    current: Any = data
    for step in steps:
        if isinstance(step, int):
            if not isinstance(current, list) or step >= len(current):
                return None
            current = current[step]
        else:
            if not isinstance(current, dict) or step not in current:
                return None
            current = current[step]
    return current


def _as_text(value: Any) -> str | None:
    """Render a resolved value as text; None and empty strings count as absent."""
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _first_text_block(data: dict[str, Any]) -> Any:
    content = data.get("content")
    if not isinstance(content, list):
        return _MISSING
    for block in content:
        if isinstance(block, dict) and block.get("type") == "text":
            return block.get("text")
    return _MISSING


def _fallback_text(data: dict[str, Any]) -> str | None:
    candidates = (
        resolve_path(data, "choices[0].message.content"),
        _first_text_block(data),
        resolve_path(data, "candidates[0].content.parts[0].text"),
        data.get("response"),
        data.get("message"),
    )
    for value in candidates:
        if value is _MISSING:
            continue
        text = _as_text(value)
        if text is not None:
            return text
    return None


def _extract_or_raise(data: Any, response_path: str | None) -> str:
    if response_path:
        text = _as_text(resolve_path(data, response_path))
        if text is not None:
            return text

    if isinstance(data, dict):
        text = _fallback_text(data)
        if text is not None:
            return text

    raise ResponseShapeMismatch(
        "No known extraction path matched the provider response",
        hint="Set a responsePath for this model.",
    )


def extract_final_text(data: Any, response_path: str | None = None) -> str:
    """Extract the assistant text from a provider response.

    A configured *response_path* wins whenever it resolves. Otherwise the
    OpenAI, Anthropic and Google shapes are tried in that order, then the
    generic ``response`` and ``message`` keys. When nothing matches, a
    diagnostic string with a truncated dump of the response is returned
    instead of raising: the upstream call itself succeeded.
    """
    try:
        return _extract_or_raise(data, response_path)
    except ResponseShapeMismatch as e:
        try:
            dump = json.dumps(data)
        except (TypeError, ValueError):
            dump = repr(data)
        logger.warning("%s: %s", e, truncate(dump))
        return f"Unable to extract response text. Raw response: {truncate(dump)}"
