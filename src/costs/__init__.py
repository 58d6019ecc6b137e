"""Cost ledger for metered provider calls."""

from src.costs.ledger import (
    COST_PRECISION,
    RATE_TABLE,
    ModelRates,
    RateTier,
    compute_cost,
    format_cost,
    rates_for,
    total_cost,
)

__all__ = [
    "COST_PRECISION",
    "RATE_TABLE",
    "ModelRates",
    "RateTier",
    "compute_cost",
    "format_cost",
    "rates_for",
    "total_cost",
]
