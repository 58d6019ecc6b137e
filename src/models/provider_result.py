"""Settled outcome of one provider call."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.models.instructions import TokenUsage
from src.models.provider_id import ProviderId
from src.models.records import Payload


class ProviderStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    NOT_CONFIGURED = "not_configured"


class ErrorKind(str, Enum):
    """Classified reason a provider produced no payload."""
    NOT_CONFIGURED = "not_configured"
    TRANSPORT = "transport"
    AUTH = "auth"
    RATE_LIMITED = "rate_limited"
    MALFORMED_RESPONSE = "malformed_response"
    TIMED_OUT = "timed_out"


class ErrorDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str = ""


class ProviderResult(BaseModel):
    """One provider's result for one request.

    A payload is present only on success; an error only otherwise.
    """

    model_config = ConfigDict(frozen=True)

    provider_id: ProviderId
    status: ProviderStatus
    payload: Payload | None = None
    error: ErrorDetail | None = None
    token_usage: TokenUsage | None = None
    elapsed_seconds: float = Field(default=0.0, ge=0)
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def _check_shape(self):
        if self.status == ProviderStatus.SUCCESS:
            if self.payload is None or self.error is not None:
                raise ValueError("successful results carry a payload and no error")
        elif self.payload is not None or self.error is None:
            raise ValueError(f"{self.status.value} results carry an error and no payload")
        return self

    @property
    def succeeded(self) -> bool:
        return self.status == ProviderStatus.SUCCESS

    @property
    def cost_usd(self) -> float:
        return self.token_usage.cost_usd if self.token_usage else 0.0

    @classmethod
    def success(
        cls,
        provider_id: ProviderId,
        payload,
        token_usage: TokenUsage | None = None,
        elapsed_seconds: float = 0.0,
    ) -> "ProviderResult":
        return cls(
            provider_id=provider_id,
            status=ProviderStatus.SUCCESS,
            payload=payload,
            token_usage=token_usage,
            elapsed_seconds=elapsed_seconds,
        )

    @classmethod
    def failure(
        cls,
        provider_id: ProviderId,
        kind: ErrorKind,
        message: str = "",
        token_usage: TokenUsage | None = None,
        elapsed_seconds: float = 0.0,
    ) -> "ProviderResult":
        """Build a non-success result; the status follows from the error kind.

        ``token_usage`` records a call the provider billed before it failed.
        """
        if kind == ErrorKind.TIMED_OUT:
            status = ProviderStatus.TIMED_OUT
        elif kind == ErrorKind.NOT_CONFIGURED:
            status = ProviderStatus.NOT_CONFIGURED
        else:
            status = ProviderStatus.FAILED
        return cls(
            provider_id=provider_id,
            status=status,
            error=ErrorDetail(kind=kind, message=message),
            token_usage=token_usage,
            elapsed_seconds=elapsed_seconds,
        )

    @classmethod
    def timed_out(cls, provider_id: ProviderId, timeout: float) -> "ProviderResult":
        return cls.failure(
            provider_id,
            ErrorKind.TIMED_OUT,
            f"no response within {timeout:g}s",
            elapsed_seconds=timeout,
        )

    @classmethod
    def not_configured(cls, provider_id: ProviderId) -> "ProviderResult":
        return cls.failure(
            provider_id,
            ErrorKind.NOT_CONFIGURED,
            f"no API key configured for {ProviderId(provider_id).value}",
        )
