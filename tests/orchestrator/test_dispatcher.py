# tests/orchestrator/test_dispatcher.py
import asyncio
import time

import pytest

from src.adapters.base import BaseAdapter
from src.adapters.errors import ProviderError
from src.models.provider_id import ProviderId
from src.models.provider_result import ErrorKind, ProviderStatus
from src.models.records import SentimentRecord
from src.models.research_request import ProviderCredentials, ResearchRequest
from src.orchestrator.dispatcher import Dispatcher
from src.orchestrator.prompts import build_fallback_instructions


def make_sentiment(score: float) -> SentimentRecord:
    return SentimentRecord.model_validate(
        {
            "score": score,
            "label": "neutral",
            "confidence": 50,
            "metrics": {
                "mentionCount": 10,
                "sentimentBreakdown": {"positive": 40, "neutral": 40, "negative": 20},
                "trending": False,
                "buzzLevel": "low",
            },
        }
    )


class ScriptedAdapter(BaseAdapter):
    """Adapter that waits ``delay`` seconds, then returns or raises ``outcome``."""

    def __init__(self, provider_id, outcome=None, delay=0.0):
        super().__init__(provider_id)
        self.outcome = outcome if outcome is not None else make_sentiment(0.5)
        self.delay = delay
        self.prompts = []
        self.cancelled = False

    async def _call(self, request, prompt, api_key):
        self.prompts.append(prompt)
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome, None


class BrokenAdapter(ScriptedAdapter):
    async def invoke(self, request, prompt=None):
        raise RuntimeError("adapter bug")


def make_request() -> ResearchRequest:
    return ResearchRequest(
        symbol="ATYR",
        company_name="aTyr Pharma",
        current_price=6.42,
        credentials=ProviderCredentials(grok="x", openai="o", gemini="g", finnhub="f"),
    )


class TestDispatcher:
    @pytest.fixture
    def request_(self):
        return make_request()

    @pytest.fixture
    def instructions(self, request_):
        return build_fallback_instructions(request_)

    @pytest.mark.asyncio
    async def test_collects_success_timeout_and_auth_failure(self, request_, instructions):
        fast = ScriptedAdapter(ProviderId.GROK)
        slow = ScriptedAdapter(ProviderId.OPENAI, delay=5.0)
        rejected = ScriptedAdapter(
            ProviderId.GEMINI, outcome=ProviderError(ErrorKind.AUTH, "invalid key")
        )
        dispatcher = Dispatcher([fast, slow, rejected], timeouts={ProviderId.OPENAI: 0.2})

        started = time.monotonic()
        results = await dispatcher.dispatch(request_, instructions)
        elapsed = time.monotonic() - started

        assert [r.provider_id for r in results] == [
            ProviderId.GROK,
            ProviderId.OPENAI,
            ProviderId.GEMINI,
        ]
        assert [r.status for r in results] == [
            ProviderStatus.SUCCESS,
            ProviderStatus.TIMED_OUT,
            ProviderStatus.FAILED,
        ]
        assert results[1].error.kind == ErrorKind.TIMED_OUT
        assert results[2].error.kind == ErrorKind.AUTH
        assert elapsed >= 0.2
        assert elapsed < 5.0
        assert slow.cancelled

    @pytest.mark.asyncio
    async def test_results_in_registration_order(self, request_, instructions):
        adapters = [
            ScriptedAdapter(ProviderId.FINNHUB, delay=0.05),
            ScriptedAdapter(ProviderId.GEMINI, delay=0.0),
            ScriptedAdapter(ProviderId.GROK, delay=0.02),
        ]
        results = await Dispatcher(adapters).dispatch(request_, instructions)

        assert [r.provider_id for r in results] == [a.provider_id for a in adapters]

    @pytest.mark.asyncio
    async def test_runs_adapters_concurrently(self, request_, instructions):
        adapters = [
            ScriptedAdapter(ProviderId.GROK, delay=0.3),
            ScriptedAdapter(ProviderId.OPENAI, delay=0.3),
            ScriptedAdapter(ProviderId.GEMINI, delay=0.3),
        ]
        started = time.monotonic()
        await Dispatcher(adapters).dispatch(request_, instructions)

        assert time.monotonic() - started < 0.8

    @pytest.mark.asyncio
    async def test_passes_each_provider_its_prompt(self, request_, instructions):
        grok = ScriptedAdapter(ProviderId.GROK)
        finnhub = ScriptedAdapter(ProviderId.FINNHUB)
        await Dispatcher([grok, finnhub]).dispatch(request_, instructions)

        assert grok.prompts == [instructions.grok_prompt]
        assert finnhub.prompts == [None]

    @pytest.mark.asyncio
    async def test_per_call_timeout_override(self, request_, instructions):
        slow = ScriptedAdapter(ProviderId.GROK, delay=5.0)
        dispatcher = Dispatcher([slow], default_timeout=30.0)

        results = await dispatcher.dispatch(request_, instructions, timeouts={"grok": 0.1})

        assert results[0].status == ProviderStatus.TIMED_OUT
        assert results[0].elapsed_seconds == 0.1

    @pytest.mark.asyncio
    async def test_not_configured_reported(self, instructions):
        request = ResearchRequest(symbol="ATYR", company_name="aTyr Pharma", current_price=6.42)
        adapter = ScriptedAdapter(ProviderId.GROK)

        results = await Dispatcher([adapter]).dispatch(request, instructions)

        assert results[0].status == ProviderStatus.NOT_CONFIGURED
        assert adapter.prompts == []

    @pytest.mark.asyncio
    async def test_adapter_bug_becomes_transport_failure(self, request_, instructions):
        results = await Dispatcher(
            [BrokenAdapter(ProviderId.GROK), ScriptedAdapter(ProviderId.OPENAI)]
        ).dispatch(request_, instructions)

        assert results[0].error.kind == ErrorKind.TRANSPORT
        assert results[1].succeeded

    @pytest.mark.asyncio
    async def test_cancellation_cancels_adapters(self, request_, instructions):
        adapters = [
            ScriptedAdapter(ProviderId.GROK, delay=10.0),
            ScriptedAdapter(ProviderId.OPENAI, delay=10.0),
        ]
        task = asyncio.create_task(Dispatcher(adapters).dispatch(request_, instructions))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert all(a.cancelled for a in adapters)

    @pytest.mark.asyncio
    async def test_unknown_override_starts_no_calls(self, request_, instructions):
        adapters = [ScriptedAdapter(ProviderId.GROK), ScriptedAdapter(ProviderId.OPENAI)]

        with pytest.raises(ValueError):
            await Dispatcher(adapters).dispatch(
                request_, instructions, timeouts={"grok": 5.0, "reddit": 5.0}
            )

        await asyncio.sleep(0)
        assert all(a.prompts == [] for a in adapters)

    @pytest.mark.asyncio
    async def test_no_adapters(self, request_, instructions):
        assert await Dispatcher([]).dispatch(request_, instructions) == []

    def test_duplicate_adapters_rejected(self):
        with pytest.raises(ValueError):
            Dispatcher([ScriptedAdapter(ProviderId.GROK), ScriptedAdapter(ProviderId.GROK)])

    def test_timeout_lookup(self):
        dispatcher = Dispatcher(
            [ScriptedAdapter(ProviderId.GROK)],
            default_timeout=20.0,
            timeouts={"gemini": 45.0},
        )
        assert dispatcher.timeout_for(ProviderId.GEMINI) == 45.0
        assert dispatcher.timeout_for(ProviderId.GROK) == 20.0
        assert dispatcher.timeout_for(ProviderId.GROK, {ProviderId.GROK: 1.0}) == 1.0
