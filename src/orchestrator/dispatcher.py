"""Concurrent fan-out of one request to every registered adapter."""

import asyncio
import logging
from typing import Mapping, Sequence

from src.adapters.base import BaseAdapter
from src.models.instructions import OrchestratorInstructions
from src.models.provider_id import ProviderId
from src.models.provider_result import ErrorKind, ProviderResult
from src.models.research_request import ResearchRequest

DEFAULT_TIMEOUT_SECONDS = 30.0


class Dispatcher:
    """Runs all adapters concurrently and collects every settled result.

    Each adapter is bounded by its own timeout; a slow adapter never delays
    or cancels its siblings. ``dispatch`` returns one result per adapter, in
    registration order, only once all of them have settled.
    """

    def __init__(
        self,
        adapters: Sequence[BaseAdapter],
        default_timeout: float = DEFAULT_TIMEOUT_SECONDS,
        timeouts: Mapping[ProviderId | str, float] | None = None,
        logger: logging.Logger | None = None,
    ):
        ids = [a.provider_id for a in adapters]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate adapters registered: {[i.value for i in ids]}")
        if default_timeout <= 0:
            raise ValueError("default_timeout must be positive")

        self._adapters = list(adapters)
        self._default_timeout = default_timeout
        self._timeouts = {ProviderId(k): v for k, v in (timeouts or {}).items()}
        self._logger = logger or logging.getLogger(__name__)

    @property
    def adapters(self) -> list[BaseAdapter]:
        return list(self._adapters)

    @property
    def provider_ids(self) -> list[ProviderId]:
        return [a.provider_id for a in self._adapters]

    def timeout_for(self, provider_id: ProviderId, overrides: Mapping | None = None) -> float:
        provider_id = ProviderId(provider_id)
        if overrides:
            for key, value in overrides.items():
                if ProviderId(key) == provider_id:
                    return value
        return self._timeouts.get(provider_id, self._default_timeout)

    async def dispatch(
        self,
        request: ResearchRequest,
        instructions: OrchestratorInstructions,
        timeouts: Mapping[ProviderId | str, float] | None = None,
    ) -> list[ProviderResult]:
        """Invoke every adapter and wait for all of them to settle.

        Args:
            request: The research request, credentials included.
            instructions: Per-provider prompts from the orchestrator.
            timeouts: Per-call overrides of the configured timeouts.

        Returns:
            One ProviderResult per registered adapter, in registration order.

        Raises:
            ValueError: If an override names an unknown provider. No call is
                started in that case.
        """
        self._logger.info(
            f"Dispatching {request.symbol} to {len(self._adapters)} providers"
        )
        # resolve every timeout before starting any call
        overrides = {ProviderId(k): v for k, v in (timeouts or {}).items()}
        plan = [(a, self.timeout_for(a.provider_id, overrides)) for a in self._adapters]

        tasks = [
            asyncio.create_task(
                self._run_one(
                    adapter,
                    request,
                    instructions.prompt_for(adapter.provider_id),
                    timeout,
                ),
                name=f"provider-{adapter.name}",
            )
            for adapter, timeout in plan
        ]

        try:
            results = await asyncio.gather(*tasks)
        finally:
            pending = [t for t in tasks if not t.done()]
            for task in pending:
                task.cancel()
            if pending:
                self._logger.info(f"Cancelling {len(pending)} outstanding provider calls")
                await asyncio.gather(*pending, return_exceptions=True)

        settled = ", ".join(f"{r.provider_id.value}={r.status.value}" for r in results)
        self._logger.info(f"Dispatch for {request.symbol} settled: {settled}")
        return list(results)

    async def _run_one(
        self,
        adapter: BaseAdapter,
        request: ResearchRequest,
        prompt: str | None,
        timeout: float,
    ) -> ProviderResult:
        try:
            return await asyncio.wait_for(adapter.invoke(request, prompt), timeout=timeout)
        except asyncio.TimeoutError:
            self._logger.warning(f"{adapter.name}: timed out after {timeout:g}s")
            return ProviderResult.timed_out(adapter.provider_id, timeout)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # adapters convert their own failures; this only catches adapter bugs
            self._logger.warning(f"{adapter.name}: unexpected error: {e}")
            return ProviderResult.failure(adapter.provider_id, ErrorKind.TRANSPORT, str(e))
