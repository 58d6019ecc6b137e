"""Orchestration stage: one reasoning-model call that tailors per-provider prompts."""

import asyncio
import logging

from anthropic import Anthropic

from src.costs.ledger import RateTier
from src.models.instructions import OrchestratorInstructions, TokenUsage
from src.models.research_request import ResearchRequest
from src.orchestrator.prompts import build_fallback_instructions, build_orchestrator_prompt
from src.parsing.json_extract import extract_json_object


class PromptOrchestrator:
    """Asks Claude to classify the company and write one prompt per provider.

    Every failure is absorbed: a missing key, a transport error, unparseable
    text or a response missing required fields all yield the fallback set.
    """

    DEFAULT_MODEL = "claude-opus-4-5-20250514"
    DEFAULT_MAX_TOKENS = 1000
    DEFAULT_TIMEOUT_SECONDS = 60.0
    RATE_TIER = RateTier.OPUS

    def __init__(
        self,
        model: str | None = None,
        max_tokens: int | None = None,
        enabled: bool = True,
        timeout_seconds: float | None = None,
        logger: logging.Logger | None = None,
    ):
        self.model = model or self.DEFAULT_MODEL
        self.max_tokens = max_tokens or self.DEFAULT_MAX_TOKENS
        self.timeout_seconds = timeout_seconds or self.DEFAULT_TIMEOUT_SECONDS
        self.enabled = enabled
        self._logger = logger or logging.getLogger(__name__)
        self._clients: dict[str, Anthropic] = {}

    def _get_client(self, api_key: str) -> Anthropic:
        """One client per key, without SDK retries."""
        client = self._clients.get(api_key)
        if client is None:
            client = Anthropic(api_key=api_key, timeout=self.timeout_seconds, max_retries=0)
            self._clients[api_key] = client
        return client

    async def generate_prompts(self, request: ResearchRequest) -> OrchestratorInstructions:
        """Produce instructions for a request. Never raises."""
        api_key = request.credentials.anthropic
        if not self.enabled or not api_key:
            reason = "disabled" if not self.enabled else "no Anthropic API key"
            self._logger.warning(f"Orchestrator {reason}, using fallback prompts for {request.symbol}")
            return build_fallback_instructions(request)

        try:
            instructions = await asyncio.wait_for(
                self._request_instructions(request, api_key), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            self._logger.warning(
                f"Orchestrator timed out after {self.timeout_seconds:g}s for {request.symbol}, "
                f"using fallback prompts"
            )
            return build_fallback_instructions(request)
        except Exception as e:
            self._logger.warning(
                f"Orchestrator failed for {request.symbol}, using fallback prompts: {e}"
            )
            return build_fallback_instructions(request)

        self._logger.info(
            f"Orchestrator classified {request.symbol} as {instructions.company_type.value} "
            f"(cost ${instructions.cost_usd:.4f})"
        )
        return instructions

    async def _request_instructions(
        self, request: ResearchRequest, api_key: str
    ) -> OrchestratorInstructions:
        client = self._get_client(api_key)
        response = await asyncio.to_thread(
            client.messages.create,
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": build_orchestrator_prompt(request)}],
        )

        text = "".join(
            block.text
            for block in response.content
            if isinstance(getattr(block, "text", None), str)
        )
        self._logger.debug(f"Orchestrator raw response {text[:200]!r}")

        data = extract_json_object(text)
        return OrchestratorInstructions.model_validate(
            {**data, "token_usage": self._usage(response), "source": "model"}
        )

    def _usage(self, response) -> TokenUsage | None:
        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "input_tokens", None)
        output_tokens = getattr(usage, "output_tokens", None)
        if not isinstance(input_tokens, int) or not isinstance(output_tokens, int):
            return None
        return TokenUsage(tier=self.RATE_TIER, input_units=input_tokens, output_units=output_tokens)

    def close(self) -> None:
        for client in self._clients.values():
            client.close()
        self._clients.clear()
