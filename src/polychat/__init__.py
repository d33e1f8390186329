"""Polychat: one chat interface over many AI model providers.

Public API:
    - chat(): Run one chat turn against a provider
    - ChatRequest / ChatResult: Wire-level request and result models
    - Config: Process-wide settings (timeouts, web search)
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from polychat.config import Config
from polychat.errors import (
    ConfigurationError,
    PolychatError,
    ResponseShapeMismatch,
    SearchExecutionError,
    ToolArgumentParseError,
    UpstreamTransportError,
)
from polychat.execute import execute_turn
from polychat.pricing import ModelPricing, estimate_cost
from polychat.request import ChatRequest, normalize_request, parse_request
from polychat.result import ChatResult, TokenUsageReport, build_result, error_result
from polychat.templates import PROVIDER_TEMPLATES, get_template
from polychat.usage import (
    InMemoryUsageRecorder,
    TokenUsageLog,
    UsageRecorder,
    build_usage_log,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from polychat.templates import ProviderTemplate

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("polychat")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("polychat").addHandler(logging.NullHandler())

logger = logging.getLogger(__name__)


async def chat(
    request: ChatRequest | Mapping[str, Any],
    *,
    config: Config | None = None,
    client: httpx.AsyncClient | None = None,
    catalog: Mapping[str, ProviderTemplate] | None = None,
    recorder: UsageRecorder | None = None,
    user_id: str | None = None,
    session_id: str | None = None,
) -> ChatResult:
    """Run one chat turn and return its result.

    Args:
        request: A ChatRequest or a raw camelCase payload.
        config: Process-wide settings; defaults to ``Config()``.
        client: Shared HTTP client. A private one is created and closed when
            omitted.
        catalog: Provider template catalog; defaults to PROVIDER_TEMPLATES.
        recorder: Receives a TokenUsageLog after a successful turn. Recorder
            failures are logged and do not affect the result.
        user_id: Stored on the usage log.
        session_id: Stored on the usage log.

    Returns:
        ChatResult. Upstream provider failures come back as
        ``success=False`` rather than raising.

    Raises:
        ConfigurationError: If the request itself is invalid.

    Example:
        result = await chat(
            {
                "provider": "OpenAI",
                "modelId": "gpt-4o",
                "message": "Hello!",
                "apiKey": "sk-...",
            }
        )
        print(result.response)
    """
    chat_request = parse_request(request)
    prepared = normalize_request(chat_request, catalog=catalog)
    resolved_config = config or Config()

    owns_client = client is None
    http = client or httpx.AsyncClient()
    try:
        trace = await execute_turn(prepared, client=http, config=resolved_config)
    except UpstreamTransportError as e:
        logger.warning("Chat turn failed for %s: %s", prepared.turn.provider, e)
        return error_result(str(e))
    finally:
        if owns_client:
            try:
                await http.aclose()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                # Cleanup should never mask the primary failure.
                logger.warning("HTTP client cleanup failed: %s", exc)

    cost = estimate_cost(trace.usage, prepared.pricing)
    if recorder is not None:
        log = build_usage_log(
            prepared,
            response_text=trace.text,
            usage=trace.usage,
            cost=cost,
            user_id=user_id or "anonymous",
            session_id=session_id,
            template=get_template(prepared.turn.provider, catalog),
        )
        try:
            await recorder.record(log)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # Recording never fails a finished turn.
            logger.warning("Usage recorder failed: %s", exc)

    return build_result(
        trace.text,
        usage=trace.usage,
        cost=cost,
        used_web_search=trace.used_web_search,
    )


__all__ = [
    "PROVIDER_TEMPLATES",
    "ChatRequest",
    "ChatResult",
    "Config",
    "ConfigurationError",
    "InMemoryUsageRecorder",
    "ModelPricing",
    "PolychatError",
    "ResponseShapeMismatch",
    "SearchExecutionError",
    "TokenUsageLog",
    "TokenUsageReport",
    "ToolArgumentParseError",
    "UpstreamTransportError",
    "UsageRecorder",
    "chat",
]
