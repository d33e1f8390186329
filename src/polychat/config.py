"""Configuration: Frozen Config for transport timeouts and web search."""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

from polychat.errors import ConfigurationError

load_dotenv()

SEARCH_API_KEY_ENV_VAR = "TAVILY_API_KEY"

TAVILY_SEARCH_URL = "https://api.tavily.com/search"
INSTANT_ANSWER_URL = "https://api.duckduckgo.com/"


@dataclass(frozen=True)
class Config:
    """Immutable configuration for Polychat execution.

    Provider credentials travel with each request; this object only holds
    process-wide settings. The search API key is auto-resolved from
    ``TAVILY_API_KEY``. Without it, web search falls back to a public
    instant-answer API with lower quality results.

    Example:
        config = Config(request_timeout_s=30)
    """

    #: Auto-resolved from ``TAVILY_API_KEY`` when *None*.
    search_api_key: str | None = None
    request_timeout_s: float = 60.0
    search_timeout_s: float = 15.0
    search_max_results: int = 5
    search_url: str = TAVILY_SEARCH_URL
    instant_answer_url: str = INSTANT_ANSWER_URL

    def __post_init__(self) -> None:
        """Auto-resolve the search key and validate numeric fields."""
        if self.request_timeout_s <= 0:
            raise ConfigurationError(
                f"request_timeout_s must be > 0, got {self.request_timeout_s}",
                hint="Every upstream provider call is bounded by this timeout.",
            )
        if self.search_timeout_s <= 0:
            raise ConfigurationError(
                f"search_timeout_s must be > 0, got {self.search_timeout_s}",
                hint="Every web-search call is bounded by this timeout.",
            )
        if self.search_max_results < 1:
            raise ConfigurationError(
                f"search_max_results must be ≥ 1, got {self.search_max_results}",
                hint="This controls how many sources a web search returns.",
            )

        if self.search_api_key is None:
            resolved_key = os.environ.get(SEARCH_API_KEY_ENV_VAR) or None
            object.__setattr__(self, "search_api_key", resolved_key)

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        return (
            f"Config(search_api_key={'[REDACTED]' if self.search_api_key else None}, "
            f"request_timeout_s={self.request_timeout_s!r}, "
            f"search_timeout_s={self.search_timeout_s!r})"
        )

    __repr__ = __str__
