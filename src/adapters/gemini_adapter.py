"""Analyst research via Gemini with Google Search grounding."""

import logging
from datetime import datetime, timezone

import httpx

from src.adapters.base import require_content
from src.adapters.errors import ProviderError, classify_exception
from src.adapters.http_adapter import HttpAdapter
from src.costs.ledger import RateTier
from src.models.instructions import TokenUsage
from src.models.provider_id import ProviderId
from src.models.records import ResearchRecord, SourceCitation
from src.models.research_request import ResearchRequest
from src.parsing.json_extract import extract_json_object

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

RESEARCH_INSTRUCTIONS = '''You are a financial research analyst with access to LIVE WEB DATA. Analyze {symbol} ({company_name}), currently trading at ${price:.2f}.

IMPORTANT: Use Google Search to find CURRENT, REAL-TIME information from the last 14 days. Do NOT rely on training data.

OUTPUT FORMAT (JSON only):
{{
  "research": {{
    "analystConsensus": "<strong-buy|buy|hold|sell|strong-sell>",
    "averagePriceTarget": <number or null>,
    "priceTargetRange": {{ "low": <number>, "high": <number> }} or null
  }},
  "keyFindings": ["<finding 1 with date>", "<finding 2 with date>", "<finding 3 with date>"],
  "recentDevelopments": ["<development 1 with date>", "<development 2 with date>"],
  "competitivePosition": "<brief assessment>",
  "risks": ["<risk 1>", "<risk 2>"],
  "opportunities": ["<opportunity 1>", "<opportunity 2>"],
  "sources": [
    {{ "title": "<article title>", "date": "<YYYY-MM-DD>", "url": "<url if available>" }}
  ]
}}

CRITICAL: Include specific dates for all findings. Return ONLY valid JSON, no markdown.'''


class GeminiResearchAdapter(HttpAdapter):
    """Web-grounded analyst consensus, price targets and recent developments."""

    DEFAULT_MODEL = "gemini-2.5-flash"
    RATE_TIER = RateTier.GEMINI_FLASH

    def __init__(
        self,
        model: str | None = None,
        temperature: float = 0.2,
        max_tokens: int | None = None,
        http_client: httpx.AsyncClient | None = None,
        request_timeout: float = 60.0,
        logger: logging.Logger | None = None,
    ):
        super().__init__(
            ProviderId.GEMINI,
            http_client=http_client,
            request_timeout=request_timeout,
            logger=logger,
        )
        self.model = model or self.DEFAULT_MODEL
        self.temperature = temperature
        self.max_tokens = max_tokens or 1024

    def build_prompt(self, request: ResearchRequest, prompt: str | None) -> str:
        instructions = RESEARCH_INSTRUCTIONS.format(
            symbol=request.symbol,
            company_name=request.company_name,
            price=request.current_price,
        )
        if prompt:
            return f"{prompt}\n\n{instructions}"
        return instructions

    async def _call(self, request: ResearchRequest, prompt: str | None, api_key: str):
        client = self._get_http_client()
        response = await client.post(
            f"{GEMINI_BASE_URL}/models/{self.model}:generateContent",
            params={"key": api_key},
            json={
                "contents": [{"parts": [{"text": self.build_prompt(request, prompt)}]}],
                "tools": [{"googleSearch": {}}],
                "generationConfig": {
                    "temperature": self.temperature,
                    "maxOutputTokens": self.max_tokens,
                },
            },
        )
        response.raise_for_status()
        body = response.json()
        usage = self._usage(body)

        candidate = _first_candidate(body)
        try:
            content = require_content(_candidate_text(candidate), self.name)
            record = ResearchRecord.model_validate(extract_json_object(content))
        except Exception as e:
            raise ProviderError(classify_exception(e), str(e), token_usage=usage) from e

        web_sources = _grounding_sources(candidate)
        if web_sources:
            record = record.model_copy(update={"sources": record.sources + web_sources})

        return record, usage

    def _usage(self, body: dict) -> TokenUsage | None:
        metadata = body.get("usageMetadata") if isinstance(body, dict) else None
        if not isinstance(metadata, dict):
            return None
        prompt_tokens = metadata.get("promptTokenCount")
        output_tokens = metadata.get("candidatesTokenCount")
        if not isinstance(prompt_tokens, int) or not isinstance(output_tokens, int):
            return None
        return TokenUsage(tier=self.RATE_TIER, input_units=prompt_tokens, output_units=output_tokens)


def _first_candidate(body) -> dict:
    if isinstance(body, dict):
        candidates = body.get("candidates")
        if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
            return candidates[0]
    return {}


def _candidate_text(candidate: dict) -> str | None:
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return None
    texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
    return "".join(texts) or None


def _grounding_sources(candidate: dict) -> tuple[SourceCitation, ...]:
    """Web sources Google Search grounding attached to the answer."""
    metadata = candidate.get("groundingMetadata")
    chunks = metadata.get("groundingChunks") if isinstance(metadata, dict) else None
    if not isinstance(chunks, list):
        return ()

    today = datetime.now(timezone.utc).date().isoformat()
    sources = []
    for chunk in chunks:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if not isinstance(web, dict):
            continue
        sources.append(
            SourceCitation(
                title=web.get("title") or "Source",
                date=today,
                url=web.get("uri") or None,
            )
        )
    return tuple(sources)
