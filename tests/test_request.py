"""Request validation, normalization, and the template catalog."""

from __future__ import annotations

from types import MappingProxyType

import pytest

from polychat.errors import ConfigurationError
from polychat.pricing import CostBreakdown, ModelPricing
from polychat.request import ChatRequest, normalize_request, parse_request
from polychat.result import ChatResult, build_result, error_result
from polychat.providers.models import TokenUsage
from polychat.templates import PROVIDER_TEMPLATES, ModelTemplate, ProviderTemplate, get_template

pytestmark = pytest.mark.unit


def _payload(**overrides):
    payload = {
        "provider": "OpenAI",
        "modelId": "gpt-4o",
        "message": "Hello",
        "apiKey": "sk-test",
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Parsing
# =============================================================================


def test_parse_camel_case_payload() -> None:
    request = parse_request(
        _payload(
            conversationHistory=[{"role": "user", "content": "Hi"}],
            webSearchEnabled=True,
            apiEndpoint="https://custom.example/v1",
            responsePath="output.text",
            pricing={"costPer1KTokens": 0.01, "inputPricePerMillion": 2.5},
        )
    )

    assert request.model_id == "gpt-4o"
    assert request.web_search_enabled is True
    assert request.conversation_history[0].content == "Hi"
    assert request.api_endpoint == "https://custom.example/v1"
    assert request.response_path == "output.text"
    assert request.pricing is not None
    assert request.pricing.cost_per_1k_tokens == 0.01
    assert request.pricing.input_price_per_million == 2.5


def test_parse_accepts_snake_case() -> None:
    request = parse_request(
        {"provider": "OpenAI", "model_id": "gpt-4o", "message": "x", "api_key": "k"}
    )
    assert request.api_key == "k"


def test_parse_passes_through_existing_request() -> None:
    request = ChatRequest(provider="OpenAI", model_id="gpt-4o", message="x", api_key="k")
    assert parse_request(request) is request


@pytest.mark.parametrize(
    "payload",
    [
        _payload(message="", image=None),
        _payload(message="   "),
        _payload(apiKey=""),
        _payload(provider=""),
        _payload(conversationHistory=[{"role": "robot", "content": "x"}]),
        _payload(pricing={"costPer1KTokens": -1}),
        {"provider": "OpenAI"},
    ],
)
def test_invalid_payload_raises_configuration_error(payload) -> None:
    with pytest.raises(ConfigurationError) as exc:
        parse_request(payload)
    assert exc.value.hint is not None


def test_image_only_request_is_valid() -> None:
    request = parse_request(_payload(message="", image="data:image/png;base64,AAAA"))
    assert request.image == "data:image/png;base64,AAAA"


def test_request_repr_redacts_api_key() -> None:
    request = parse_request(_payload(apiKey="sk-very-secret"))

    assert "sk-very-secret" not in repr(request)
    assert "sk-very-secret" not in str(request)


# =============================================================================
# Normalization
# =============================================================================


def test_template_defaults_fill_gaps() -> None:
    prepared = normalize_request(parse_request(_payload()))

    assert prepared.endpoint == "https://api.openai.com/v1/chat/completions"
    assert prepared.header_template["Authorization"] == "Bearer {{API_KEY}}"
    assert prepared.response_path == "choices[0].message.content"
    assert prepared.pricing == ModelPricing(cost_per_1k_tokens=0.005)
    assert prepared.api_key == "sk-test"


def test_request_values_win_over_template() -> None:
    prepared = normalize_request(
        parse_request(
            _payload(
                apiEndpoint="https://proxy.example/v1/chat",
                headers={"api-key": "{{API_KEY}}"},
                responsePath="data.text",
                pricing={"inputPricePerMillion": 1.0, "outputPricePerMillion": 4.0},
            )
        )
    )

    assert prepared.endpoint == "https://proxy.example/v1/chat"
    assert dict(prepared.header_template) == {"api-key": "{{API_KEY}}"}
    assert prepared.response_path == "data.text"
    assert prepared.pricing == ModelPricing(
        input_price_per_million=1.0, output_price_per_million=4.0
    )


def test_unknown_provider_requires_endpoint() -> None:
    with pytest.raises(ConfigurationError, match="No API endpoint") as exc:
        normalize_request(parse_request(_payload(provider="Acme")))
    assert "apiEndpoint" in (exc.value.hint or "")


def test_unknown_provider_with_endpoint() -> None:
    prepared = normalize_request(
        parse_request(_payload(provider="Acme", apiEndpoint="https://acme.example/chat"))
    )

    assert prepared.endpoint == "https://acme.example/chat"
    assert dict(prepared.header_template) == {}
    assert prepared.response_path is None
    assert prepared.pricing is None


def test_turn_carries_history_and_flags() -> None:
    prepared = normalize_request(
        parse_request(
            _payload(
                conversationHistory=[
                    {"role": "user", "content": "Hi"},
                    {"role": "assistant", "content": "Hello"},
                ],
                webSearchEnabled=True,
            )
        )
    )

    turn = prepared.turn
    assert [(m.role, m.content) for m in turn.history] == [
        ("user", "Hi"),
        ("assistant", "Hello"),
    ]
    assert turn.web_search is True
    assert prepared.input_text == "Hi\nHello\nHello"


def test_custom_catalog_replaces_builtin_templates() -> None:
    catalog = MappingProxyType(
        {
            "OpenAI": ProviderTemplate(
                name="OpenAI",
                default_endpoint="https://mirror.example/v1/chat/completions",
                default_response_path="choices[0].message.content",
                models=(ModelTemplate("gpt-4o", "GPT-4o", 0.1),),
            )
        }
    )

    prepared = normalize_request(parse_request(_payload()), catalog=catalog)

    assert prepared.endpoint == "https://mirror.example/v1/chat/completions"
    assert prepared.pricing == ModelPricing(cost_per_1k_tokens=0.1)


# =============================================================================
# Catalog
# =============================================================================


def test_catalog_covers_known_providers() -> None:
    assert set(PROVIDER_TEMPLATES) == {
        "OpenAI",
        "Anthropic",
        "Google",
        "DeepSeek",
        "xAI",
        "Perplexity AI",
        "Mistral AI",
        "Moonshot AI",
        "Zhipu AI",
    }


def test_catalog_is_read_only() -> None:
    with pytest.raises(TypeError):
        PROVIDER_TEMPLATES["Acme"] = PROVIDER_TEMPLATES["OpenAI"]  # type: ignore[index]


def test_google_template_key_is_not_in_headers() -> None:
    template = get_template("Google")
    assert template is not None
    assert "{{MODEL_ID}}" in template.default_endpoint
    assert all("{{API_KEY}}" not in v for v in template.header_template.values())


def test_find_model_ignores_case() -> None:
    template = get_template("Anthropic")
    assert template is not None
    model = template.find_model("CLAUDE-3-HAIKU-20240307")
    assert model is not None
    assert model.name == "Claude 3 Haiku"


# =============================================================================
# Results
# =============================================================================


def test_result_wire_shape() -> None:
    result = build_result(
        "answer",
        usage=TokenUsage(input_tokens=10, output_tokens=5, is_estimated=True),
        cost=CostBreakdown(input_cost=0.01, output_cost=0.02),
        used_web_search=False,
    )

    wire = result.to_wire()
    assert wire["success"] is True
    assert wire["response"] == "answer"
    assert wire["usedWebSearch"] is False
    assert wire["tokenUsage"]["inputTokens"] == 10
    assert wire["tokenUsage"]["outputTokens"] == 5
    assert wire["tokenUsage"]["totalTokens"] == 15
    assert wire["tokenUsage"]["estimatedCost"] == pytest.approx(0.03)
    assert wire["tokenUsage"]["isEstimated"] is True
    assert "error" not in wire


def test_error_result_wire_shape() -> None:
    assert error_result("boom").to_wire() == {"success": False, "error": "boom"}
    assert isinstance(error_result("boom"), ChatResult)
