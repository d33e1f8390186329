"""Per-model pricing and cost estimation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from polychat.templates import get_template

if TYPE_CHECKING:
    from collections.abc import Mapping

    from polychat.providers.models import TokenUsage
    from polychat.templates import ProviderTemplate

_PER_MILLION = 1_000_000
_PER_THOUSAND = 1_000


@dataclass(frozen=True)
class ModelPricing:
    """Model prices in USD.

    Split per-million input/output prices take precedence over the flat
    per-1K price when either is set.
    """

    input_price_per_million: float = 0.0
    output_price_per_million: float = 0.0
    cost_per_1k_tokens: float = 0.0

    def __post_init__(self) -> None:
        """Reject negative prices."""
        for name in (
            "input_price_per_million",
            "output_price_per_million",
            "cost_per_1k_tokens",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"ModelPricing.{name} must be >= 0")

    @property
    def has_split_prices(self) -> bool:
        return bool(self.input_price_per_million or self.output_price_per_million)


@dataclass(frozen=True)
class CostBreakdown:
    """Cost of one chat turn."""

    input_cost: float = 0.0
    output_cost: float = 0.0

    @property
    def total_cost(self) -> float:
        return self.input_cost + self.output_cost


def estimate_cost(usage: TokenUsage, pricing: ModelPricing | None) -> CostBreakdown:
    """Price *usage* with *pricing*; no pricing means zero cost."""
    if pricing is None:
        return CostBreakdown()

    if pricing.has_split_prices:
        return CostBreakdown(
            input_cost=usage.input_tokens / _PER_MILLION
            * pricing.input_price_per_million,
            output_cost=usage.output_tokens / _PER_MILLION
            * pricing.output_price_per_million,
        )

    # Flat price applies to both directions.
    rate = pricing.cost_per_1k_tokens / _PER_THOUSAND
    return CostBreakdown(
        input_cost=usage.input_tokens * rate,
        output_cost=usage.output_tokens * rate,
    )


def template_pricing(
    provider: str,
    model_id: str,
    catalog: Mapping[str, ProviderTemplate] | None = None,
) -> ModelPricing | None:
    """Return the catalog's flat price for a model, if it is listed."""
    template = get_template(provider, catalog)
    if template is None:
        return None
    model = template.find_model(model_id)
    if model is None:
        return None
    return ModelPricing(cost_per_1k_tokens=model.cost_per_1k_tokens)
