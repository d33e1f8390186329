"""Provider adapters and the dispatch table that selects them."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from polychat import constants as c

from .anthropic import AnthropicAdapter
from .base import ProviderAdapter
from .gemini import GeminiAdapter
from .openai import (
    DefaultAdapter,
    OpenAIAdapter,
    OpenAICompatibleAdapter,
    ZhipuAdapter,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

_OPENAI_COMPATIBLE = OpenAICompatibleAdapter()

ADAPTERS: Mapping[str, ProviderAdapter] = MappingProxyType(
    {
        c.OPENAI: OpenAIAdapter(),
        c.DEEPSEEK: _OPENAI_COMPATIBLE,
        c.XAI: _OPENAI_COMPATIBLE,
        c.PERPLEXITY: _OPENAI_COMPATIBLE,
        c.MISTRAL: _OPENAI_COMPATIBLE,
        c.MOONSHOT: _OPENAI_COMPATIBLE,
        c.ZHIPU: ZhipuAdapter(),
        c.ANTHROPIC: AnthropicAdapter(),
        c.GOOGLE: GeminiAdapter(),
    }
)

_DEFAULT = DefaultAdapter()


def get_adapter(provider: str) -> ProviderAdapter:
    """Return the adapter for *provider*; unknown names get the default adapter."""
    return ADAPTERS.get(provider, _DEFAULT)


__all__ = [
    "ADAPTERS",
    "AnthropicAdapter",
    "DefaultAdapter",
    "GeminiAdapter",
    "OpenAIAdapter",
    "OpenAICompatibleAdapter",
    "ProviderAdapter",
    "ZhipuAdapter",
    "get_adapter",
]
