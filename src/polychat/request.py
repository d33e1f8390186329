"""Phase 1: Request validation and normalization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from polychat.errors import ConfigurationError
from polychat.pricing import ModelPricing, template_pricing
from polychat.providers.models import ChatTurn, HistoryMessage
from polychat.templates import get_template

if TYPE_CHECKING:
    from collections.abc import Mapping

    from polychat.templates import ProviderTemplate


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HistoryItem(_CamelModel):
    """One prior conversation turn."""

    role: Literal["user", "assistant", "system"]
    content: str = ""


class PricingSpec(_CamelModel):
    """Optional per-model prices carried with a request."""

    cost_per_1k_tokens: float = Field(default=0.0, ge=0, alias="costPer1KTokens")
    input_price_per_million: float = Field(default=0.0, ge=0)
    output_price_per_million: float = Field(default=0.0, ge=0)


class ChatRequest(_CamelModel):
    """A chat turn as received from callers.

    Field names accept both ``snake_case`` and the ``camelCase`` wire names
    (``modelId``, ``conversationHistory``, ``webSearchEnabled``...).
    """

    provider: str = Field(min_length=1)
    model_id: str = Field(min_length=1)
    message: str = ""
    image: str | None = None
    conversation_history: list[HistoryItem] = Field(default_factory=list)
    web_search_enabled: bool = False
    api_endpoint: str | None = None
    api_key: str = Field(min_length=1)
    headers: dict[str, str] | None = None
    response_path: str | None = None
    pricing: PricingSpec | None = None

    @model_validator(mode="after")
    def _require_content(self) -> ChatRequest:
        if not self.message.strip() and not self.image:
            raise ValueError("message or image is required")
        return self

    def __repr__(self) -> str:
        """Return a representation with the API key redacted."""
        return (
            f"ChatRequest(provider={self.provider!r}, model_id={self.model_id!r}, "
            f"api_key='[REDACTED]', web_search_enabled={self.web_search_enabled})"
        )

    __str__ = __repr__


@dataclass(frozen=True)
class PreparedTurn:
    """A validated request with provider defaults filled in."""

    turn: ChatTurn
    endpoint: str
    api_key: str
    header_template: Mapping[str, str]
    response_path: str | None
    pricing: ModelPricing | None

    @property
    def input_text(self) -> str:
        """History plus current message, for token estimation."""
        texts = [item.content for item in self.turn.history if item.content]
        if self.turn.message:
            texts.append(self.turn.message)
        return "\n".join(texts)


def parse_request(payload: ChatRequest | Mapping[str, Any]) -> ChatRequest:
    """Validate a raw payload into a ChatRequest.

    Raises:
        ConfigurationError: If the payload is invalid.
    """
    if isinstance(payload, ChatRequest):
        return payload
    try:
        return ChatRequest.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(loc) for loc in err["loc"]) or "request"
            for err in e.errors()
        )
        raise ConfigurationError(
            f"Invalid chat request ({fields})",
            hint="Provide provider, modelId, apiKey, and a message or image.",
        ) from e


def normalize_request(
    request: ChatRequest,
    *,
    catalog: Mapping[str, ProviderTemplate] | None = None,
) -> PreparedTurn:
    """Fill endpoint, headers, response path and pricing from the catalog.

    Values on the request always win over template defaults.

    Raises:
        ConfigurationError: If no endpoint can be determined.
    """
    template = get_template(request.provider, catalog)

    endpoint = request.api_endpoint or (template.default_endpoint if template else None)
    if not endpoint:
        raise ConfigurationError(
            f"No API endpoint for provider {request.provider!r}",
            hint="Pass apiEndpoint for providers outside the template catalog.",
        )

    if request.headers is not None:
        header_template: Mapping[str, str] = dict(request.headers)
    elif template is not None:
        header_template = dict(template.header_template)
    else:
        header_template = {}

    response_path = request.response_path or (
        template.default_response_path if template else None
    )

    pricing: ModelPricing | None
    if request.pricing is not None:
        pricing = ModelPricing(
            input_price_per_million=request.pricing.input_price_per_million,
            output_price_per_million=request.pricing.output_price_per_million,
            cost_per_1k_tokens=request.pricing.cost_per_1k_tokens,
        )
    else:
        pricing = template_pricing(request.provider, request.model_id, catalog)

    turn = ChatTurn(
        provider=request.provider,
        model_id=request.model_id,
        message=request.message,
        image=request.image or None,
        history=tuple(
            HistoryMessage(role=item.role, content=item.content)
            for item in request.conversation_history
        ),
        web_search=request.web_search_enabled,
    )
    return PreparedTurn(
        turn=turn,
        endpoint=endpoint,
        api_key=request.api_key,
        header_template=header_template,
        response_path=response_path,
        pricing=pricing,
    )
