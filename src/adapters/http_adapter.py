"""Base for adapters that talk to plain REST endpoints over httpx."""

import logging

import httpx

from src.adapters.base import BaseAdapter
from src.models.provider_id import ProviderId


class HttpAdapter(BaseAdapter):
    """Owns a lazily created ``httpx.AsyncClient`` unless one is injected."""

    def __init__(
        self,
        provider_id: ProviderId,
        http_client: httpx.AsyncClient | None = None,
        request_timeout: float = 30.0,
        logger: logging.Logger | None = None,
    ):
        super().__init__(provider_id, logger=logger)
        self._http_client = http_client
        self._owns_client = http_client is None
        self._request_timeout = request_timeout

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._request_timeout)
        return self._http_client

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
