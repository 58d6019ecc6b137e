"""Base contract shared by all provider adapters."""

import logging
import time
from abc import ABC, abstractmethod

from src.adapters.errors import ProviderError, classify_exception
from src.models.instructions import TokenUsage
from src.models.provider_id import ProviderId
from src.models.provider_result import ErrorKind, ProviderResult
from src.models.research_request import ResearchRequest


class BaseAdapter(ABC):
    """Abstract base class for all provider adapters.

    ``invoke`` never raises for provider failures: a missing key, a transport
    error or an unusable response all come back as a ``ProviderResult``.
    Only cancellation propagates.
    """

    def __init__(self, provider_id: ProviderId, logger: logging.Logger | None = None):
        self._provider_id = ProviderId(provider_id)
        self._logger = logger or logging.getLogger(type(self).__module__)

    @property
    def provider_id(self) -> ProviderId:
        return self._provider_id

    @property
    def name(self) -> str:
        return self._provider_id.value

    async def invoke(self, request: ResearchRequest, prompt: str | None = None) -> ProviderResult:
        """Call the provider for one request.

        Args:
            request: The research request, including credentials.
            prompt: Tailored prompt for this provider, if it takes one.

        Returns:
            A settled ProviderResult.
        """
        api_key = request.credentials.for_provider(self._provider_id)
        if not api_key:
            self._logger.debug(f"{self.name}: no API key configured, skipping")
            return ProviderResult.not_configured(self._provider_id)

        started = time.monotonic()
        try:
            payload, usage = await self._call(request, prompt, api_key)
        except Exception as e:
            elapsed = time.monotonic() - started
            kind = classify_exception(e)
            usage = getattr(e, "token_usage", None)
            self._logger.warning(
                f"{self.name}: call for {request.symbol} failed ({kind.value}): {e}"
            )
            return ProviderResult.failure(
                self._provider_id, kind, str(e), token_usage=usage, elapsed_seconds=elapsed
            )

        elapsed = time.monotonic() - started
        cost = f", cost ${usage.cost_usd:.4f}" if usage else ""
        self._logger.info(f"{self.name}: {request.symbol} settled in {elapsed:.1f}s{cost}")
        return ProviderResult.success(
            self._provider_id, payload, token_usage=usage, elapsed_seconds=elapsed
        )

    @abstractmethod
    async def _call(
        self,
        request: ResearchRequest,
        prompt: str | None,
        api_key: str,
    ) -> tuple[object, TokenUsage | None]:
        """Perform the network call and return ``(payload, usage)``.

        Raise on any failure; ``invoke`` classifies it.
        """
        pass

    async def aclose(self) -> None:
        """Release network clients held by the adapter."""
        pass


def require_content(content: str | None, provider: str) -> str:
    """Return non-empty response text or raise a malformed-response error."""
    if not content or not content.strip():
        raise ProviderError(ErrorKind.MALFORMED_RESPONSE, f"Empty response from {provider}")
    return content
