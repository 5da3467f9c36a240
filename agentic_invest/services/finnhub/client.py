from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import FinnhubConfig
from .exceptions import (
    FinnhubAPIError,
    FinnhubAuthError,
    FinnhubNotFoundError,
    FinnhubRateLimitError,
)

logger = logging.getLogger(__name__)


class FinnhubClient:
    def __init__(
        self,
        api_key: str,
        config: FinnhubConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.config = config or FinnhubConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> FinnhubClient:
        limits = httpx.Limits(
            max_connections=self.config.max_connections,
            max_keepalive_connections=self.config.max_keepalive_connections,
        )
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            limits=limits,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: Any,
    ) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("Closed FinnhubClient")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "FinnhubClient must be used as async context manager"
            )
        return self._client

    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``endpoint`` once and return the decoded JSON body."""
        query = dict(params or {})
        query["token"] = self.api_key

        try:
            response = await self.client.get(endpoint, params=query)
        except httpx.RequestError as e:
            raise FinnhubAPIError(f"Network error calling {endpoint}: {e}") from e

        if response.status_code == 401:
            raise FinnhubAuthError("Authentication failed", status_code=401)
        elif response.status_code == 403:
            raise FinnhubAuthError(
                f"Access denied for {endpoint} (plan restriction)", status_code=403
            )
        elif response.status_code == 404:
            raise FinnhubNotFoundError(
                f"Resource not found: {endpoint}", status_code=404
            )
        elif response.status_code == 429:
            raise FinnhubRateLimitError("Rate limit exceeded", status_code=429)
        elif response.status_code >= 400:
            raise FinnhubAPIError(
                f"Finnhub API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        return response.json()
