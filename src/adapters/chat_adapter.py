"""Shared plumbing for providers behind an OpenAI-compatible chat API."""

import logging
from abc import abstractmethod

from openai import AsyncOpenAI

from src.adapters.base import BaseAdapter, require_content
from src.adapters.errors import ProviderError, classify_exception
from src.costs.ledger import RateTier
from src.models.instructions import TokenUsage
from src.models.provider_id import ProviderId
from src.models.research_request import ResearchRequest
from src.parsing.json_extract import extract_json_object


class ChatCompletionAdapter(BaseAdapter):
    """Adapter that sends a system + user message and parses a JSON reply.

    Subclasses provide the system prompt, the default user prompt and the
    conversion of the extracted JSON object into a payload record.
    """

    BASE_URL: str | None = None
    DEFAULT_MODEL: str = ""
    RATE_TIER: RateTier
    SYSTEM_PROMPT: str = ""

    def __init__(
        self,
        provider_id: ProviderId,
        model: str | None = None,
        temperature: float = 0.3,
        max_tokens: int | None = None,
        logger: logging.Logger | None = None,
    ):
        super().__init__(provider_id, logger=logger)
        self.model = model or self.DEFAULT_MODEL
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._clients: dict[str, AsyncOpenAI] = {}

    def _get_client(self, api_key: str) -> AsyncOpenAI:
        """One client per key; keys are read-only for the process lifetime.

        SDK retries are disabled: each invocation makes exactly one request.
        """
        client = self._clients.get(api_key)
        if client is None:
            client = AsyncOpenAI(api_key=api_key, base_url=self.BASE_URL, max_retries=0)
            self._clients[api_key] = client
        return client

    async def _call(self, request: ResearchRequest, prompt: str | None, api_key: str):
        client = self._get_client(api_key)
        params = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.SYSTEM_PROMPT},
                {"role": "user", "content": self.build_user_prompt(request, prompt)},
            ],
            "temperature": self.temperature,
        }
        if self.max_tokens:
            params["max_tokens"] = self.max_tokens

        response = await client.chat.completions.create(**params)
        usage = self._usage(response)

        try:
            content = None
            if response.choices:
                content = response.choices[0].message.content
            content = require_content(content, self.name)
            self._logger.debug(f"{self.name}: raw response {content[:200]!r}")

            data = extract_json_object(content)
            payload = self.build_payload(data, request)
        except Exception as e:
            raise ProviderError(classify_exception(e), str(e), token_usage=usage) from e
        return payload, usage

    def _usage(self, response) -> TokenUsage | None:
        usage = getattr(response, "usage", None)
        prompt_tokens = getattr(usage, "prompt_tokens", None)
        completion_tokens = getattr(usage, "completion_tokens", None)
        if not isinstance(prompt_tokens, int) or not isinstance(completion_tokens, int):
            return None
        return TokenUsage(
            tier=self.RATE_TIER,
            input_units=prompt_tokens,
            output_units=completion_tokens,
        )

    @abstractmethod
    def build_user_prompt(self, request: ResearchRequest, prompt: str | None) -> str:
        pass

    @abstractmethod
    def build_payload(self, data: dict, request: ResearchRequest):
        """Validate the extracted JSON object into a payload record."""
        pass

    async def aclose(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
