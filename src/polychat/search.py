"""Web search backing the ``web_search`` tool.

Two backends, chosen by configuration:

1. Tavily, when a search API key is configured. Returns a synthesized
   answer plus ranked sources.
2. DuckDuckGo's public instant-answer API otherwise. Returns an abstract and
   a few related topics; coverage is much thinner.

Failures surface as ``SearchExecutionError``. Callers in the tool layer turn
them into result text so the chat turn continues.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from polychat.errors import SearchExecutionError

if TYPE_CHECKING:
    from polychat.config import Config

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = (
    "No search results found. Configuring a TAVILY_API_KEY would improve "
    "web search quality."
)

_MAX_RELATED_TOPICS = 3


class WebSearchClient:
    """Run web searches with the configured backend."""

    def __init__(self, client: httpx.AsyncClient, config: Config) -> None:
        self._client = client
        self._config = config

    async def search(self, query: str) -> str:
        """Search for *query* and return formatted result text.

        Raises:
            SearchExecutionError: If the backend call fails.
        """
        try:
            if self._config.search_api_key:
                text = await self._search_tavily(query)
            else:
                text = await self._search_instant_answer(query)
        except asyncio.CancelledError:
            raise
        except (httpx.HTTPError, ValueError) as e:
            raise SearchExecutionError(str(e) or type(e).__name__) from e
        return text or NO_RESULTS_MESSAGE

    async def _search_tavily(self, query: str) -> str:
        response = await self._client.post(
            self._config.search_url,
            json={
                "api_key": self._config.search_api_key,
                "query": query,
                "max_results": self._config.search_max_results,
                "include_answer": True,
            },
            timeout=self._config.search_timeout_s,
        )
        response.raise_for_status()
        return format_tavily_results(response.json())

    async def _search_instant_answer(self, query: str) -> str:
        response = await self._client.get(
            self._config.instant_answer_url,
            params={
                "q": query,
                "format": "json",
                "no_html": "1",
                "skip_disambig": "1",
            },
            timeout=self._config.search_timeout_s,
        )
        response.raise_for_status()
        return format_instant_answer(response.json())


def format_tavily_results(data: Any) -> str:
    """Render a Tavily response as a summary plus numbered sources."""
    if not isinstance(data, dict):
        return ""
    answer = data.get("answer") or ""
    results = data.get("results")
    if not isinstance(results, list):
        results = []

    lines: list[str] = []
    for idx, item in enumerate(results, start=1):
        if not isinstance(item, dict):
            continue
        lines.append(f"{idx}. {item.get('title', '')}")
        lines.append(f"   URL: {item.get('url', '')}")
        lines.append(f"   {item.get('content', '')}")

    if not answer and not lines:
        return ""
    return f"Summary: {answer}\n\nSources:\n" + "\n".join(lines)


def format_instant_answer(data: Any) -> str:
    """Render a DuckDuckGo instant answer with up to three related topics."""
    if not isinstance(data, dict):
        return ""
    text = ""
    abstract = data.get("AbstractText")
    if abstract:
        text += f"{abstract}\nSource: {data.get('AbstractURL', '')}\n"

    topics = data.get("RelatedTopics")
    if isinstance(topics, list):
        related = [
            t["Text"]
            for t in topics
            if isinstance(t, dict) and isinstance(t.get("Text"), str) and t["Text"]
        ][:_MAX_RELATED_TOPICS]
        if related:
            text += "\n".join(f"• {line}" for line in related)
    return text
