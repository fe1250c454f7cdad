"""Single-request HTTP transport."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable
from urllib.parse import urlencode

import httpx

from integration.fetch.types import HttpResponse, TransportError

logger = logging.getLogger(__name__)


def build_url(base_url: str, endpoint: str, params: dict[str, str] | None = None) -> str:
    """Join base URL, endpoint path and encoded query string."""
    return f"{base_url.rstrip('/')}/{endpoint.lstrip('/')}?{urlencode(params or {})}"


@runtime_checkable
class HttpTransport(Protocol):
    """Performs one HTTP GET."""

    async def get(self, url: str, timeout: float) -> HttpResponse: ...


class HttpxTransport:
    """HttpTransport backed by a pooled ``httpx.AsyncClient``."""

    def __init__(
        self,
        user_agent: str = "data-integration/0.1",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.user_agent = user_agent
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy load client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
                follow_redirects=True,
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            )
        return self._client

    async def get(self, url: str, timeout: float) -> HttpResponse:
        try:
            response = await self.client.get(url, timeout=timeout)
        except httpx.TimeoutException as e:
            raise TransportError(f"Timeout after {timeout}s: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        return HttpResponse(status_code=response.status_code, body=response.content)

    async def close(self) -> None:
        """Close client."""
        if self._client:
            try:
                await self._client.aclose()
            except Exception as e:
                logger.debug(f"Error closing client: {e}")
            finally:
                self._client = None

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
