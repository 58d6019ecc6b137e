"""Synthesis of settled provider results into one composite report."""

from datetime import datetime, timezone
from typing import Iterable

from src.analyzers.sentiment_result import label_for_score
from src.costs.ledger import total_cost
from src.models.composite_report import AggregateSentiment, CompositeReport
from src.models.instructions import OrchestratorInstructions
from src.models.provider_result import ProviderResult
from src.models.research_request import ResearchRequest

SCORE_PRECISION = 4


class ReportAggregator:
    """Merges whatever subset of providers succeeded.

    The composite score is the simple mean of the succeeded providers'
    scores. With no successes the aggregate is absent, not neutral.
    """

    def synthesize(
        self,
        request: ResearchRequest,
        instructions: OrchestratorInstructions,
        results: Iterable[ProviderResult],
        generated_at: datetime | None = None,
    ) -> CompositeReport:
        results = tuple(results)
        succeeded = [r for r in results if r.succeeded]

        return CompositeReport(
            symbol=request.symbol,
            company_name=request.company_name,
            company_type=instructions.company_type,
            key_topics=instructions.key_topics,
            instructions_source=instructions.source,
            provider_status={r.provider_id: r.status for r in results},
            errors={r.provider_id: r.error for r in results if r.error is not None},
            summaries={r.provider_id: r.payload.to_summary() for r in succeeded},
            results=results,
            aggregate=self.aggregate(succeeded),
            orchestration_cost=instructions.cost_usd,
            total_cost=total_cost([instructions.cost_usd, *(r.cost_usd for r in results)]),
            generated_at=generated_at or datetime.now(timezone.utc),
        )

    @staticmethod
    def aggregate(succeeded: list[ProviderResult]) -> AggregateSentiment | None:
        if not succeeded:
            return None
        score = round(sum(r.payload.score for r in succeeded) / len(succeeded), SCORE_PRECISION)
        return AggregateSentiment(
            score=score,
            label=label_for_score(score),
            contributors=tuple(r.provider_id for r in succeeded),
        )
