"""Shared transport-side error helpers.

Every way an upstream call can fail (non-2xx status, network error, timeout)
maps to ``UpstreamTransportError`` so the chat turn can report one failure
shape without substring matching.
"""

from __future__ import annotations

import asyncio

import httpx

from polychat._http import truncate
from polychat.errors import UpstreamTransportError, _walk_exception_chain


def extract_status_code(exc: BaseException) -> int | None:
    """Walk the exception chain to find an HTTP status code."""
    for e in _walk_exception_chain(exc):
        for attr in ("status_code", "status"):
            value = getattr(e, attr, None)
            if isinstance(value, int) and 100 <= value <= 599:
                return value
        response = getattr(e, "response", None)
        value = getattr(response, "status_code", None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    return None


def _auth_hint(status_code: int | None) -> str | None:
    if status_code in {401, 403}:
        return "Check the provider API key and the model's header template."
    return None


def status_error(
    response: httpx.Response, *, provider: str
) -> UpstreamTransportError:
    """Build the error for a non-2xx provider response."""
    detail = truncate(response.text)
    return UpstreamTransportError(
        f"{provider} request failed (status={response.status_code}): {detail}",
        hint=_auth_hint(response.status_code),
        status_code=response.status_code,
        provider=provider,
        detail=detail,
    )


def wrap_transport_error(
    exc: BaseException,
    *,
    provider: str,
    message: str | None = None,
) -> UpstreamTransportError:
    """Map httpx and decoding exceptions into UpstreamTransportError."""
    if isinstance(exc, asyncio.CancelledError):
        raise exc

    # Already wrapped: fill in missing context only.
    if isinstance(exc, UpstreamTransportError):
        if exc.provider is None:
            exc.provider = provider
        return exc

    status_code = extract_status_code(exc)
    hint: str | None = _auth_hint(status_code)
    for e in _walk_exception_chain(exc):
        if isinstance(e, httpx.TimeoutException):
            hint = "The provider did not answer in time; raise request_timeout_s."
            break

    msg = message or f"{provider} request failed"
    status_note = f" (status={status_code})" if isinstance(status_code, int) else ""
    cause = str(exc) or type(exc).__name__
    detail = truncate(cause)
    return UpstreamTransportError(
        f"{msg}{status_note}: {detail}",
        hint=hint,
        status_code=status_code,
        provider=provider,
        detail=detail,
    )
