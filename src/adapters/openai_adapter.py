"""Official company news analysis via OpenAI chat completions."""

import logging
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from src.adapters.chat_adapter import ChatCompletionAdapter
from src.costs.ledger import RateTier
from src.models.instructions import NonEmptyStr
from src.models.provider_id import ProviderId
from src.models.records import NewsDigest, NewsRecord
from src.models.research_request import ResearchRequest

DEFAULT_SOURCE = "OpenAI"


class _Headline(BaseModel):
    # any per-headline sentiment from the model is ignored
    title: NonEmptyStr
    summary: str | None = None
    source: str | None = None
    url: str | None = None


class _NewsAnalysis(BaseModel):
    headlines: list[_Headline]
    key_topics: list[str] = Field(default_factory=list, alias="keyTopics")
    market_impact: str | None = Field(default=None, alias="marketImpact")


class OpenAINewsAdapter(ChatCompletionAdapter):
    """Summarizes recent company news; sentiment is recomputed locally."""

    DEFAULT_MODEL = "gpt-4o-mini"
    RATE_TIER = RateTier.GPT_4O_MINI
    DEFAULT_MAX_TOKENS = 1500

    SYSTEM_PROMPT = '''You are a financial news analyst. Search for and summarize the latest news about a stock.
Return ONLY valid JSON in this format:
{
  "headlines": [
    { "title": "headline text", "summary": "brief summary", "source": "optional source" }
  ],
  "keyTopics": ["topic1", "topic2"],
  "marketImpact": "brief assessment of potential market impact"
}

Focus on:
- Recent news from the last 24-48 hours
- Earnings, guidance, analyst ratings
- Product launches, partnerships, legal issues
- Industry trends affecting the stock
- Provide 3-5 key headlines with summaries'''

    def __init__(
        self,
        model: str | None = None,
        temperature: float = 0.3,
        max_tokens: int | None = None,
        logger: logging.Logger | None = None,
    ):
        super().__init__(
            ProviderId.OPENAI,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens or self.DEFAULT_MAX_TOKENS,
            logger=logger,
        )

    def build_user_prompt(self, request: ResearchRequest, prompt: str | None) -> str:
        if prompt:
            return f"{prompt}\n\nCompany: {request.symbol} ({request.company_name})."
        return (
            f"Search for and summarize the latest news about {request.symbol} "
            f"({request.company_name}). What are the key headlines?"
        )

    def build_payload(self, data: dict, request: ResearchRequest) -> NewsDigest:
        analysis = _NewsAnalysis.model_validate(data)
        now = datetime.now(timezone.utc)
        headlines = tuple(
            NewsRecord(
                headline=h.title,
                summary=h.summary or "",
                source=h.source or DEFAULT_SOURCE,
                url=h.url or "",
                timestamp=now,
            )
            for h in analysis.headlines
        )
        return NewsDigest(
            headlines=headlines,
            key_topics=tuple(analysis.key_topics),
            market_impact=analysis.market_impact,
        )
