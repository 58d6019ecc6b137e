"""Cost ledger for metered provider calls.

Rates are USD per 1,000 units (tokens). Every cost is rounded to
``COST_PRECISION`` places at the point it is computed, and totals are the
rounded sum of already-rounded contributions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

COST_PRECISION = 4


class RateTier(str, Enum):
    """Pricing tiers for the metered providers."""
    OPUS = "opus"
    # priced in the table; no stage currently bills against it
    SONNET = "sonnet"
    GPT_4O_MINI = "gpt-4o-mini"
    GROK_FAST = "grok-fast"
    GEMINI_FLASH = "gemini-flash"


@dataclass(frozen=True)
class ModelRates:
    """Per-thousand-unit input and output rates in USD."""
    input_per_thousand: float
    output_per_thousand: float


RATE_TABLE: dict[RateTier, ModelRates] = {
    RateTier.OPUS: ModelRates(input_per_thousand=0.015, output_per_thousand=0.075),
    RateTier.SONNET: ModelRates(input_per_thousand=0.003, output_per_thousand=0.015),
    RateTier.GPT_4O_MINI: ModelRates(input_per_thousand=0.00015, output_per_thousand=0.0006),
    RateTier.GROK_FAST: ModelRates(input_per_thousand=0.0002, output_per_thousand=0.0005),
    RateTier.GEMINI_FLASH: ModelRates(input_per_thousand=0.0003, output_per_thousand=0.0025),
}


def rates_for(tier: RateTier | str) -> ModelRates:
    """Look up the rates of a tier by enum or value."""
    return RATE_TABLE[RateTier(tier)]


def compute_cost(
    input_units: int,
    output_units: int,
    rates: ModelRates | RateTier | str,
) -> float:
    """Compute the USD cost of one call.

    Args:
        input_units: Prompt tokens consumed.
        output_units: Completion tokens produced.
        rates: Explicit rates or the tier to price against.

    Returns:
        Cost in USD rounded to ``COST_PRECISION`` places.

    Raises:
        ValueError: If either unit count is negative.
    """
    if input_units < 0 or output_units < 0:
        raise ValueError(
            f"Unit counts must be non-negative, got input={input_units} output={output_units}"
        )
    if not isinstance(rates, ModelRates):
        rates = rates_for(rates)

    cost = (
        (input_units / 1000) * rates.input_per_thousand
        + (output_units / 1000) * rates.output_per_thousand
    )
    return round(cost, COST_PRECISION)


def total_cost(costs: Iterable[float]) -> float:
    """Sum per-stage costs, rounded to ``COST_PRECISION`` places."""
    return round(sum(costs), COST_PRECISION)


def format_cost(cost: float) -> str:
    """Render a cost for display."""
    if cost == 0:
        return "$0.00"
    if cost < 0.001:
        return "< $0.001"
    if cost < 0.01:
        return f"${cost:.4f}"
    return f"${cost:.3f}"
