"""Provider templates: default endpoints, headers, response paths, and prices.

The catalog is immutable and passed around explicitly. Callers that need a
different catalog build their own ``dict[str, ProviderTemplate]`` and hand it
to ``normalize_request``/``chat``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from polychat import constants as c

if TYPE_CHECKING:
    from collections.abc import Mapping

_BEARER = "Bearer {{API_KEY}}"


@dataclass(frozen=True)
class ModelTemplate:
    """A known model and its flat price per 1K tokens."""

    id: str
    name: str
    cost_per_1k_tokens: float = 0.0


@dataclass(frozen=True)
class ProviderTemplate:
    """Defaults for a provider's chat endpoint."""

    name: str
    default_endpoint: str
    default_response_path: str
    header_template: Mapping[str, str] = field(default_factory=dict)
    models: tuple[ModelTemplate, ...] = ()

    def find_model(self, model_id: str) -> ModelTemplate | None:
        """Return the template for *model_id*, ignoring case."""
        wanted = model_id.lower()
        for model in self.models:
            if model.id.lower() == wanted:
                return model
        return None


_OPENAI_STYLE_PATH = "choices[0].message.content"


def _bearer_headers() -> dict[str, str]:
    return {"Content-Type": "application/json", "Authorization": _BEARER}


PROVIDER_TEMPLATES: Mapping[str, ProviderTemplate] = MappingProxyType(
    {
        c.OPENAI: ProviderTemplate(
            name=c.OPENAI,
            default_endpoint="https://api.openai.com/v1/chat/completions",
            default_response_path=_OPENAI_STYLE_PATH,
            header_template=_bearer_headers(),
            models=(
                ModelTemplate("gpt-5", "GPT-5", 0.02),
                ModelTemplate("gpt-4-turbo", "GPT-4 Turbo", 0.01),
                ModelTemplate("gpt-4", "GPT-4", 0.03),
                ModelTemplate("gpt-3.5-turbo", "GPT-3.5 Turbo", 0.001),
                ModelTemplate("gpt-4o", "GPT-4o", 0.005),
            ),
        ),
        c.ANTHROPIC: ProviderTemplate(
            name=c.ANTHROPIC,
            default_endpoint="https://api.anthropic.com/v1/messages",
            default_response_path="content[0].text",
            header_template={
                "Content-Type": "application/json",
                "x-api-key": "{{API_KEY}}",
                "anthropic-version": "2023-06-01",
            },
            models=(
                ModelTemplate(
                    "claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet", 0.003
                ),
                ModelTemplate("claude-3-opus-20240229", "Claude 3 Opus", 0.015),
                ModelTemplate("claude-3-sonnet-20240229", "Claude 3 Sonnet", 0.003),
                ModelTemplate("claude-3-haiku-20240307", "Claude 3 Haiku", 0.00025),
            ),
        ),
        c.GOOGLE: ProviderTemplate(
            name=c.GOOGLE,
            default_endpoint=(
                "https://generativelanguage.googleapis.com/v1beta/models/"
                "{{MODEL_ID}}:generateContent"
            ),
            default_response_path="candidates[0].content.parts[0].text",
            header_template={"Content-Type": "application/json"},
            models=(
                ModelTemplate("gemini-1.5-pro", "Gemini 1.5 Pro", 0.00125),
                ModelTemplate("gemini-1.5-flash", "Gemini 1.5 Flash", 0.000075),
                ModelTemplate("gemini-pro", "Gemini Pro", 0.0005),
            ),
        ),
        c.DEEPSEEK: ProviderTemplate(
            name=c.DEEPSEEK,
            default_endpoint="https://api.deepseek.com/v1/chat/completions",
            default_response_path=_OPENAI_STYLE_PATH,
            header_template=_bearer_headers(),
            models=(
                ModelTemplate("deepseek-chat", "DeepSeek Chat", 0.00014),
                ModelTemplate("deepseek-coder", "DeepSeek Coder", 0.00014),
            ),
        ),
        c.PERPLEXITY: ProviderTemplate(
            name=c.PERPLEXITY,
            default_endpoint="https://api.perplexity.ai/chat/completions",
            default_response_path=_OPENAI_STYLE_PATH,
            header_template=_bearer_headers(),
            models=(
                ModelTemplate("sonar", "Sonar (Lightweight)", 0.0002),
                ModelTemplate("sonar-pro", "Sonar Pro (Advanced)", 0.001),
            ),
        ),
        c.XAI: ProviderTemplate(
            name=c.XAI,
            default_endpoint="https://api.x.ai/v1/chat/completions",
            default_response_path=_OPENAI_STYLE_PATH,
            header_template=_bearer_headers(),
            models=(
                ModelTemplate("grok-beta", "Grok Beta", 0.005),
                ModelTemplate("grok-vision-beta", "Grok Vision Beta", 0.005),
            ),
        ),
        c.MISTRAL: ProviderTemplate(
            name=c.MISTRAL,
            default_endpoint="https://api.mistral.ai/v1/chat/completions",
            default_response_path=_OPENAI_STYLE_PATH,
            header_template=_bearer_headers(),
            models=(
                ModelTemplate("mistral-large-latest", "Mistral Large", 0.004),
                ModelTemplate("mistral-medium-latest", "Mistral Medium", 0.0027),
                ModelTemplate("mistral-small-latest", "Mistral Small", 0.001),
                ModelTemplate("open-mistral-7b", "Open Mistral 7B", 0.00025),
            ),
        ),
        c.MOONSHOT: ProviderTemplate(
            name=c.MOONSHOT,
            default_endpoint="https://api.moonshot.cn/v1/chat/completions",
            default_response_path=_OPENAI_STYLE_PATH,
            header_template=_bearer_headers(),
        ),
        c.ZHIPU: ProviderTemplate(
            name=c.ZHIPU,
            default_endpoint="https://open.bigmodel.cn/api/paas/v4/chat/completions",
            default_response_path=_OPENAI_STYLE_PATH,
            header_template=_bearer_headers(),
        ),
    }
)


def get_template(
    provider: str, catalog: Mapping[str, ProviderTemplate] | None = None
) -> ProviderTemplate | None:
    """Return the template for *provider*, or None for unknown providers."""
    templates = PROVIDER_TEMPLATES if catalog is None else catalog
    return templates.get(provider)
