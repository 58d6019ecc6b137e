"""Company headlines from Finnhub, classified locally."""

import logging
from datetime import datetime, timedelta, timezone

import httpx
from pydantic import BaseModel, Field, TypeAdapter

from src.adapters.base import ProviderError
from src.adapters.http_adapter import HttpAdapter
from src.models.instructions import NonEmptyStr
from src.models.provider_id import ProviderId
from src.models.provider_result import ErrorKind
from src.models.records import NewsDigest, NewsRecord
from src.models.research_request import ResearchRequest

FINNHUB_BASE_URL = "https://finnhub.io/api/v1"


class _FinnhubItem(BaseModel):
    headline: NonEmptyStr
    summary: str | None = None
    source: str | None = None
    url: str | None = None
    published: int = Field(alias="datetime", ge=0)


_ITEMS = TypeAdapter(list[_FinnhubItem])


class FinnhubNewsAdapter(HttpAdapter):
    """Headline feed for a symbol over a lookback window.

    Takes no prompt. Finnhub does not supply sentiment; each headline is
    classified by the rule-based classifier.
    """

    def __init__(
        self,
        lookback_days: int = 7,
        max_items: int = 10,
        http_client: httpx.AsyncClient | None = None,
        request_timeout: float = 15.0,
        logger: logging.Logger | None = None,
    ):
        super().__init__(
            ProviderId.FINNHUB,
            http_client=http_client,
            request_timeout=request_timeout,
            logger=logger,
        )
        self.lookback_days = lookback_days
        self.max_items = max_items

    async def _call(self, request: ResearchRequest, prompt: str | None, api_key: str):
        to_date = datetime.now(timezone.utc).date()
        from_date = to_date - timedelta(days=self.lookback_days)

        client = self._get_http_client()
        response = await client.get(
            f"{FINNHUB_BASE_URL}/company-news",
            params={
                "symbol": request.symbol,
                "from": from_date.isoformat(),
                "to": to_date.isoformat(),
                "token": api_key,
            },
        )
        response.raise_for_status()
        data = response.json()

        if not isinstance(data, list):
            raise ProviderError(
                ErrorKind.MALFORMED_RESPONSE,
                f"Finnhub returned {type(data).__name__}, expected a list",
            )

        items = _ITEMS.validate_python(data[:self.max_items])
        headlines = tuple(
            NewsRecord(
                headline=item.headline,
                summary=item.summary or "",
                source=item.source or "",
                url=item.url or "",
                timestamp=datetime.fromtimestamp(item.published, tz=timezone.utc),
            )
            for item in items
        )
        return NewsDigest(headlines=headlines), None
