"""Pipeline entry point: orchestrate, dispatch, aggregate."""

import logging
from typing import TYPE_CHECKING

from src.adapters import (
    BaseAdapter,
    FinnhubNewsAdapter,
    GeminiResearchAdapter,
    GrokSentimentAdapter,
    OpenAINewsAdapter,
)
from src.models.composite_report import CompositeReport
from src.models.research_request import ResearchRequest
from src.orchestrator.aggregator import ReportAggregator
from src.orchestrator.dispatcher import Dispatcher
from src.orchestrator.prompt_orchestrator import PromptOrchestrator

if TYPE_CHECKING:
    from src.config.settings import Settings


class ResearchEngine:
    """Runs one research request through every stage.

    ``run`` always produces a CompositeReport; provider failures are
    reported in it, never raised.
    """

    def __init__(
        self,
        orchestrator: PromptOrchestrator,
        dispatcher: Dispatcher,
        aggregator: ReportAggregator | None = None,
        logger: logging.Logger | None = None,
    ):
        self._orchestrator = orchestrator
        self._dispatcher = dispatcher
        self._aggregator = aggregator or ReportAggregator()
        self._logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_settings(
        cls, settings: "Settings", logger: logging.Logger | None = None
    ) -> "ResearchEngine":
        """Build the engine with the default provider roster.

        Providers disabled in settings are not registered and do not appear
        in the report.
        """
        providers = settings.providers
        adapters: list[BaseAdapter] = []
        if providers.grok.enabled:
            adapters.append(
                GrokSentimentAdapter(
                    model=providers.grok.model,
                    temperature=providers.grok.temperature,
                    max_tokens=providers.grok.max_tokens,
                    logger=logger,
                )
            )
        if providers.openai.enabled:
            adapters.append(
                OpenAINewsAdapter(
                    model=providers.openai.model,
                    temperature=providers.openai.temperature,
                    max_tokens=providers.openai.max_tokens,
                    logger=logger,
                )
            )
        if providers.gemini.enabled:
            adapters.append(
                GeminiResearchAdapter(
                    model=providers.gemini.model,
                    temperature=providers.gemini.temperature,
                    max_tokens=providers.gemini.max_tokens,
                    logger=logger,
                )
            )
        if providers.finnhub.enabled:
            adapters.append(
                FinnhubNewsAdapter(
                    lookback_days=providers.finnhub.lookback_days,
                    max_items=providers.finnhub.max_items,
                    logger=logger,
                )
            )

        orchestrator = PromptOrchestrator(
            model=settings.orchestrator.model,
            max_tokens=settings.orchestrator.max_tokens,
            enabled=settings.orchestrator.enabled,
            timeout_seconds=settings.orchestrator.timeout_seconds,
            logger=logger,
        )
        dispatcher = Dispatcher(
            adapters,
            default_timeout=settings.dispatcher.default_timeout_seconds,
            timeouts=settings.dispatcher.timeouts,
            logger=logger,
        )
        return cls(orchestrator, dispatcher, logger=logger)

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    async def run(self, request: ResearchRequest) -> CompositeReport:
        """Research one ticker end to end."""
        self._logger.info(f"Researching {request.symbol} ({request.company_name})")

        instructions = await self._orchestrator.generate_prompts(request)
        results = await self._dispatcher.dispatch(request, instructions)
        report = self._aggregator.synthesize(request, instructions, results)

        aggregate = (
            f"{report.aggregate.label.value} ({report.aggregate.score:+.2f}) "
            f"from {report.aggregate.provider_count} providers"
            if report.aggregate
            else "no providers succeeded"
        )
        self._logger.info(
            f"{request.symbol}: {aggregate}, total cost ${report.total_cost:.4f}"
        )
        return report

    async def aclose(self) -> None:
        """Release network clients held by the adapters."""
        for adapter in self._dispatcher.adapters:
            await adapter.aclose()
        self._orchestrator.close()
