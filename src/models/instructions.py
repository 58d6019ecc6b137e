"""Orchestrator output: company classification and per-provider prompts."""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, computed_field

from src.costs.ledger import RateTier, compute_cost
from src.models.provider_id import ProviderId

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CompanyType(str, Enum):
    BIOTECH = "biotech"
    TECH = "tech"
    FINANCE = "finance"
    RETAIL = "retail"
    ENERGY = "energy"
    HEALTHCARE = "healthcare"
    INDUSTRIAL = "industrial"
    OTHER = "other"


class TokenUsage(BaseModel):
    """Units consumed by one metered call.

    ``cost_usd`` is always derived from the unit counts and the tier's rates.
    """

    model_config = ConfigDict(frozen=True)

    tier: RateTier
    input_units: int = Field(ge=0)
    output_units: int = Field(ge=0)

    @computed_field
    @property
    def cost_usd(self) -> float:
        return compute_cost(self.input_units, self.output_units, self.tier)


class OrchestratorInstructions(BaseModel):
    """Prompts tailored for each downstream provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    company_type: CompanyType = Field(alias="companyType")
    key_topics: tuple[str, ...] = Field(alias="keyTopics")
    grok_prompt: NonEmptyStr = Field(alias="grokPrompt")
    openai_prompt: NonEmptyStr = Field(alias="openaiPrompt")
    gemini_prompt: NonEmptyStr = Field(alias="geminiPrompt")
    token_usage: TokenUsage | None = None
    source: Literal["model", "fallback"] = "model"

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"

    @property
    def cost_usd(self) -> float:
        """Orchestration cost; zero on the fallback path."""
        return self.token_usage.cost_usd if self.token_usage else 0.0

    def prompt_for(self, provider_id: ProviderId) -> str | None:
        """Prompt for a provider; providers without one get None."""
        prompts = {
            ProviderId.GROK: self.grok_prompt,
            ProviderId.OPENAI: self.openai_prompt,
            ProviderId.GEMINI: self.gemini_prompt,
        }
        return prompts.get(ProviderId(provider_id))
