"""Retrying JSON fetcher."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any

import tenacity

from integration.common.component import ComponentFactory
from integration.common.events import EventLogger, LogSink
from integration.fetch.config import FetchConfig
from integration.fetch.transport import HttpTransport, HttpxTransport, build_url
from integration.fetch.types import DecodeError, FetchExhausted, TransportError

Sleep = Callable[[float], Awaitable[None]]


class RetryingFetcher(ComponentFactory[FetchConfig]):
    """Fetches decoded JSON with bounded retries and exponential backoff."""

    _config_type = FetchConfig

    def __init__(
        self,
        config: FetchConfig,
        transport: HttpTransport | None = None,
        logger: EventLogger | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize fetcher."""
        super().__init__(config)
        self.transport = transport or HttpxTransport(user_agent=config.user_agent)
        self.logger = logger or LogSink(__name__)
        self._sleep = sleep

    def _retrying(self, endpoint: str) -> tenacity.AsyncRetrying:
        def log_retry(retry_state: tenacity.RetryCallState) -> None:
            delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
            self.logger.info(
                f"Retrying ({retry_state.attempt_number}/{self.config.max_retries}) - "
                f"{endpoint} in {delay:g}s"
            )

        return tenacity.AsyncRetrying(
            retry=tenacity.retry_if_exception_type((TransportError, DecodeError)),
            wait=tenacity.wait_exponential(multiplier=self.config.backoff_base, exp_base=2),
            stop=tenacity.stop_after_attempt(self.config.max_retries),
            before_sleep=log_retry,
            sleep=self._sleep,
        )

    async def fetch(self, endpoint: str, params: dict[str, str] | None = None) -> Any:
        """Fetch ``endpoint`` and return the decoded JSON body.

        Non-2xx responses, transport failures and undecodable bodies all
        consume one attempt. Raises FetchExhausted once ``max_retries``
        attempts have failed; cancellation is never retried.
        """
        url = build_url(self.config.base_url, endpoint, params)

        try:
            async for attempt in self._retrying(endpoint):
                with attempt:
                    data = await self._attempt(endpoint, url, attempt.retry_state.attempt_number)
        except tenacity.RetryError as e:
            self.logger.critical(
                f"Maximum retries exceeded - {endpoint} failed", {"url": url}
            )
            raise FetchExhausted(endpoint, self.config.max_retries) from e.last_attempt.exception()

        return data

    async def _attempt(self, endpoint: str, url: str, attempt: int) -> Any:
        """Run a single attempt."""
        context = {"url": url, "attempt": attempt}
        try:
            response = await self.transport.get(url, self.config.timeout)
        except TransportError as e:
            self.logger.warning(f"API request failed ({endpoint}): {e}", context)
            raise

        if not response.ok:
            self.logger.warning(
                f"API request failed ({endpoint}): HTTP {response.status_code}", context
            )
            raise TransportError(f"HTTP {response.status_code}", status_code=response.status_code)

        try:
            data = json.loads(response.body)
        except ValueError as e:
            self.logger.warning(f"JSON decoding failed ({endpoint}): {e}", context)
            raise DecodeError(f"Invalid JSON from {endpoint}: {e}") from e

        self.logger.info(f"Fetched data: {endpoint}", {"url": url})
        return data

    async def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> RetryingFetcher:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
