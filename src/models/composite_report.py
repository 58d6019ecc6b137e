"""Final artifact of a research run."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from src.analyzers.sentiment_result import SentimentLabel
from src.models.instructions import CompanyType
from src.models.provider_id import ProviderId
from src.models.provider_result import ErrorDetail, ProviderResult, ProviderStatus


class AggregateSentiment(BaseModel):
    """Simple mean of the succeeded providers' scores."""

    model_config = ConfigDict(frozen=True)

    score: float = Field(ge=-1.0, le=1.0)
    label: SentimentLabel
    contributors: tuple[ProviderId, ...]

    @property
    def provider_count(self) -> int:
        return len(self.contributors)


class CompositeReport(BaseModel):
    """Unified result for one ticker.

    ``aggregate`` is None when no provider succeeded, which is distinct from
    a neutral aggregate. ``provider_status`` lists every configured provider.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    company_name: str
    company_type: CompanyType
    key_topics: tuple[str, ...] = ()
    instructions_source: Literal["model", "fallback"]
    provider_status: dict[ProviderId, ProviderStatus]
    errors: dict[ProviderId, ErrorDetail] = Field(default_factory=dict)
    summaries: dict[ProviderId, str] = Field(default_factory=dict)
    results: tuple[ProviderResult, ...] = ()
    aggregate: AggregateSentiment | None = None
    orchestration_cost: float = Field(default=0.0, ge=0)
    total_cost: float = Field(default=0.0, ge=0)
    generated_at: datetime

    @property
    def succeeded(self) -> list[ProviderId]:
        return [p for p, s in self.provider_status.items() if s == ProviderStatus.SUCCESS]

    @property
    def unsuccessful(self) -> list[ProviderId]:
        return [p for p, s in self.provider_status.items() if s != ProviderStatus.SUCCESS]

    def result_for(self, provider_id: ProviderId) -> ProviderResult | None:
        for result in self.results:
            if result.provider_id == provider_id:
                return result
        return None
