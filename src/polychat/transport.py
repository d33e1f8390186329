"""Outbound provider calls over ``httpx``."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from polychat._http import API_KEY_PLACEHOLDER, DEFAULT_HEADERS
from polychat.providers._errors import status_error, wrap_transport_error

if TYPE_CHECKING:
    from collections.abc import Mapping

    from polychat.providers.base import ProviderAdapter

logger = logging.getLogger(__name__)


def build_headers(
    header_template: Mapping[str, str] | None,
    api_key: str,
    *,
    key_in_query: bool = False,
) -> dict[str, str]:
    """Render request headers from a template.

    ``{{API_KEY}}`` placeholders are substituted. When no header carries the
    key and it is not sent as a query parameter, ``Authorization: Bearer`` is
    added.
    """
    headers = dict(DEFAULT_HEADERS)
    carries_key = False
    for name, value in (header_template or {}).items():
        if API_KEY_PLACEHOLDER in value:
            carries_key = True
            value = value.replace(API_KEY_PLACEHOLDER, api_key)
        headers[name] = value

    if not carries_key and not key_in_query:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


async def dispatch_chat_request(
    client: httpx.AsyncClient,
    *,
    provider: str,
    endpoint: str,
    headers: Mapping[str, str],
    body: dict[str, Any],
    params: Mapping[str, str] | None = None,
    timeout_s: float,
) -> Any:
    """POST *body* to a provider and return the decoded JSON response.

    Any JSON value is returned as-is; unexpected shapes are left to text
    extraction.

    Raises:
        UpstreamTransportError: On non-2xx status, network failure, timeout,
            or a body that is not JSON. Never retried.
    """
    logger.debug("POST %s provider=%s", endpoint, provider)
    try:
        response = await client.post(
            endpoint,
            json=body,
            headers=dict(headers),
            params=dict(params) if params else None,
            timeout=timeout_s,
        )
    except asyncio.CancelledError:
        raise
    except httpx.HTTPError as e:
        raise wrap_transport_error(e, provider=provider) from e

    if not response.is_success:
        raise status_error(response, provider=provider)

    try:
        return response.json()
    except ValueError as e:
        raise wrap_transport_error(
            e, provider=provider, message=f"{provider} returned invalid JSON"
        ) from e


async def send_wire_request(
    client: httpx.AsyncClient,
    adapter: ProviderAdapter,
    *,
    provider: str,
    model_id: str,
    endpoint: str,
    api_key: str,
    header_template: Mapping[str, str] | None,
    body: dict[str, Any],
    timeout_s: float,
) -> Any:
    """Resolve endpoint and headers through *adapter*, then dispatch."""
    url, params = adapter.resolve_endpoint(endpoint, model_id, api_key)
    headers = build_headers(header_template, api_key, key_in_query=bool(params))
    return await dispatch_chat_request(
        client,
        provider=provider,
        endpoint=url,
        headers=headers,
        body=body,
        params=params,
        timeout_s=timeout_s,
    )
