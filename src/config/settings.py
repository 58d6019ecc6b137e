from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.models.research_request import ProviderCredentials
from src.orchestrator.settings import DispatcherSettings, OrchestratorSettings


class SystemConfig(BaseModel):
    name: str = "Spectra Research Engine"
    version: str = "1.0.0"


class ProviderSettings(BaseModel):
    """Settings for a model-backed provider adapter."""

    enabled: bool = True
    model: str | None = None
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, ge=1, le=8192)


class FinnhubSettings(BaseModel):
    """Settings for the Finnhub news feed."""

    enabled: bool = True
    lookback_days: int = Field(default=7, ge=1, le=365)
    max_items: int = Field(default=10, ge=1, le=100)


class ProvidersConfig(BaseModel):
    grok: ProviderSettings = Field(default_factory=ProviderSettings)
    openai: ProviderSettings = Field(
        default_factory=lambda: ProviderSettings(max_tokens=1500)
    )
    gemini: ProviderSettings = Field(
        default_factory=lambda: ProviderSettings(temperature=0.2, max_tokens=1024)
    )
    finnhub: FinnhubSettings = Field(default_factory=FinnhubSettings)


class ApiKeysConfig(BaseSettings):
    """Provider credentials, read from the environment only."""

    model_config = SettingsConfigDict(extra="ignore")

    anthropic_api_key: str = ""
    xai_api_key: str = ""
    openai_api_key: str = ""
    gemini_api_key: str = ""
    finnhub_api_key: str = ""

    def to_credentials(self) -> ProviderCredentials:
        return ProviderCredentials(
            anthropic=self.anthropic_api_key,
            grok=self.xai_api_key,
            openai=self.openai_api_key,
            gemini=self.gemini_api_key,
            finnhub=self.finnhub_api_key,
        )


class Settings(BaseModel):
    system: SystemConfig = Field(default_factory=SystemConfig)
    orchestrator: OrchestratorSettings = Field(default_factory=OrchestratorSettings)
    dispatcher: DispatcherSettings = Field(default_factory=DispatcherSettings)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    api_keys: ApiKeysConfig = Field(default_factory=ApiKeysConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file; API keys come from the environment."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        data.pop("api_keys", None)

        return cls(**data, api_keys=ApiKeysConfig())
