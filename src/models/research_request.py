"""Research request and the credentials it carries."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.provider_id import ProviderId


class ProviderCredentials(BaseModel):
    """Opaque API keys, one per provider. Blank keys count as absent."""

    model_config = ConfigDict(frozen=True)

    anthropic: str | None = None
    grok: str | None = None
    openai: str | None = None
    gemini: str | None = None
    finnhub: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def for_provider(self, provider_id: ProviderId) -> str | None:
        """Return the key for a downstream provider, or None if unset."""
        return getattr(self, ProviderId(provider_id).value)

    def configured(self) -> list[ProviderId]:
        """Downstream providers that have a key."""
        return [p for p in ProviderId if self.for_provider(p)]


class ResearchRequest(BaseModel):
    """A single user-initiated research scan for one ticker."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(min_length=1, max_length=12)
    company_name: str = Field(min_length=1)
    sector: str = "Unknown"
    current_price: float = Field(ge=0)
    credentials: ProviderCredentials = Field(default_factory=ProviderCredentials)

    @field_validator("symbol", mode="before")
    @classmethod
    def _normalize_symbol(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("company_name", mode="before")
    @classmethod
    def _strip_company_name(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("sector", mode="before")
    @classmethod
    def _default_sector(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return "Unknown"
        return value
