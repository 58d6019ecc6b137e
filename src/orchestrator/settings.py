"""Configuration for the orchestration and dispatch stages."""

from pydantic import BaseModel, Field, field_validator

from src.models.provider_id import ProviderId


class OrchestratorSettings(BaseModel):
    """Settings for PromptOrchestrator."""

    enabled: bool = True
    model: str = "claude-opus-4-5-20250514"
    max_tokens: int = Field(default=1000, ge=100, le=4096)
    timeout_seconds: float = Field(default=60.0, gt=0, le=600)


class DispatcherSettings(BaseModel):
    """Settings for Dispatcher."""

    default_timeout_seconds: float = Field(default=30.0, gt=0, le=300)
    timeouts: dict[ProviderId, float] = Field(default_factory=dict)

    @field_validator("timeouts")
    @classmethod
    def _positive_timeouts(cls, value: dict[ProviderId, float]) -> dict[ProviderId, float]:
        for provider_id, timeout in value.items():
            if timeout <= 0:
                raise ValueError(f"timeout for {provider_id.value} must be positive")
        return value
