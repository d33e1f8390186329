"""Exception hierarchy for Polychat."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class PolychatError(Exception):
    """Base exception for all Polychat errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(PolychatError):
    """Configuration or request validation failed."""


class UpstreamTransportError(PolychatError):
    """A provider HTTP call failed, timed out, or returned a non-2xx status.

    This is the only failure that ends a chat turn. ``detail`` holds the
    truncated response body (or transport error text) for diagnostics.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status_code: int | None = None,
        provider: str | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code
        self.provider = provider
        self.detail = detail


class ToolArgumentParseError(PolychatError):
    """Tool-call arguments were not valid JSON.

    Recovered locally: the raw argument string becomes the search query.
    """


class SearchExecutionError(PolychatError):
    """The web-search sub-call failed.

    Recovered locally: the error text becomes the tool result content.
    """


class ResponseShapeMismatch(PolychatError):
    """No known extraction path matched a provider response.

    Recovered locally: a diagnostic placeholder becomes the response text.
    """


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, with cycle protection."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
