"""Models package for the research orchestration engine."""

from src.models.provider_id import ProviderId
from src.models.research_request import ProviderCredentials, ResearchRequest
from src.models.instructions import CompanyType, OrchestratorInstructions, TokenUsage
from src.models.records import (
    AnalystConsensus,
    AudienceMix,
    BuzzLevel,
    NewsDigest,
    NewsRecord,
    Payload,
    PriceTargetRange,
    ResearchRecord,
    SentimentBreakdown,
    SentimentRecord,
    SocialMetrics,
    SourceCitation,
    TopTake,
)
from src.models.provider_result import ErrorDetail, ErrorKind, ProviderResult, ProviderStatus
from src.models.composite_report import AggregateSentiment, CompositeReport

__all__ = [
    "ProviderId",
    "ProviderCredentials",
    "ResearchRequest",
    "CompanyType",
    "OrchestratorInstructions",
    "TokenUsage",
    "AnalystConsensus",
    "AudienceMix",
    "BuzzLevel",
    "NewsDigest",
    "NewsRecord",
    "Payload",
    "PriceTargetRange",
    "ResearchRecord",
    "SentimentBreakdown",
    "SentimentRecord",
    "SocialMetrics",
    "SourceCitation",
    "TopTake",
    "ErrorDetail",
    "ErrorKind",
    "ProviderResult",
    "ProviderStatus",
    "AggregateSentiment",
    "CompositeReport",
]
