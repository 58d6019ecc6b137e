"""Social sentiment from X/Twitter via the Grok API."""

import logging

from src.adapters.chat_adapter import ChatCompletionAdapter
from src.costs.ledger import RateTier
from src.models.provider_id import ProviderId
from src.models.records import SentimentRecord
from src.models.research_request import ResearchRequest

XAI_BASE_URL = "https://api.x.ai/v1"


class GrokSentimentAdapter(ChatCompletionAdapter):
    """Grok has first-party access to X posts; used for social sentiment."""

    BASE_URL = XAI_BASE_URL
    DEFAULT_MODEL = "grok-4-1-fast-reasoning"
    RATE_TIER = RateTier.GROK_FAST

    SYSTEM_PROMPT = '''You are a social media sentiment analyst with access to X/Twitter data.
Analyze the current sentiment around a stock and return ONLY valid JSON.

Output format:
{
  "sentiment": {
    "score": <number -1 to 1>,
    "label": "<bullish|neutral|bearish>",
    "confidence": <number 0-100>
  },
  "metrics": {
    "mentionCount": <estimated number>,
    "sentimentBreakdown": { "positive": <percent>, "neutral": <percent>, "negative": <percent> },
    "trending": <boolean>,
    "buzzLevel": "<low|medium|high|viral>"
  },
  "topTakes": [
    { "text": "<key opinion>", "engagement": <number>, "sentiment": "<positive|neutral|negative>" }
  ],
  "retailVsInstitutional": "<retail-heavy|mixed|institutional>"
}'''

    def __init__(
        self,
        model: str | None = None,
        temperature: float = 0.3,
        max_tokens: int | None = None,
        logger: logging.Logger | None = None,
    ):
        super().__init__(
            ProviderId.GROK,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            logger=logger,
        )

    def build_user_prompt(self, request: ResearchRequest, prompt: str | None) -> str:
        base = (
            f"Analyze current X/Twitter sentiment for {request.symbol} ({request.company_name}).\n"
            "What are people saying? Is it trending? "
            "What's the retail vs institutional breakdown?\n"
            "Consider posts from the last 24-48 hours."
        )
        if prompt:
            return f"{prompt}\n\n{base}"
        return base

    def build_payload(self, data: dict, request: ResearchRequest) -> SentimentRecord:
        return SentimentRecord.model_validate(data)
