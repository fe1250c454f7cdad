"""Concurrent fetch of a named request batch."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Sequence

from integration.common.events import EventLogger, LogSink
from integration.fetch.client import RetryingFetcher
from integration.fetch.types import (
    CANCELLED,
    FetchExhausted,
    FetchFailure,
    FetchOutcome,
    FetchRequest,
    FetchSuccess,
    as_payload,
)


class ParallelFetchCoordinator:
    """Runs one retrying fetch per request and collects every outcome.

    A failing request never cancels or delays the others; the batch returns
    only once every request is terminal.
    """

    def __init__(self, fetcher: RetryingFetcher, logger: EventLogger | None = None) -> None:
        self.fetcher = fetcher
        self.logger = logger or LogSink(__name__)
        limit = fetcher.config.max_concurrency
        self._semaphore: asyncio.Semaphore | None = asyncio.Semaphore(limit) if limit else None

    async def _fetch_one(self, request: FetchRequest) -> FetchOutcome:
        async with self._semaphore or contextlib.nullcontext():
            try:
                data = await self.fetcher.fetch(request.endpoint, request.params)
            except FetchExhausted as e:
                return FetchFailure(key=request.key, reason=str(e))

        return FetchSuccess(key=request.key, payload=as_payload(data))

    async def fetch_all(self, requests: Sequence[FetchRequest]) -> dict[str, FetchOutcome]:
        """Fetch every request concurrently; one outcome per request key."""
        keys = [r.key for r in requests]
        if duplicates := sorted({k for k in keys if keys.count(k) > 1}):
            raise ValueError(f"Duplicate request keys in batch: {duplicates}")
        if not requests:
            return {}

        tasks = {
            r.key: asyncio.create_task(self._fetch_one(r), name=f"fetch:{r.key}")
            for r in requests
        }
        deadline = self.fetcher.config.deadline_seconds

        try:
            _, pending = await asyncio.wait(tasks.values(), timeout=deadline)
        except asyncio.CancelledError:
            await self._cancel(tasks.values())
            raise

        if pending:
            self.logger.error(
                f"Batch deadline of {deadline}s exceeded, cancelling {len(pending)} request(s)"
            )
            await self._cancel(pending)

        outcomes: dict[str, FetchOutcome] = {}
        for key, task in tasks.items():
            if task.cancelled():
                outcomes[key] = FetchFailure(key=key, reason="Request cancelled", error=CANCELLED)
                continue
            if (exc := task.exception()) is not None:
                await self._cancel(tasks.values())
                raise exc
            outcomes[key] = task.result()

        failed = [k for k, o in outcomes.items() if not o.ok]
        self.logger.info(
            f"Fetched {len(outcomes) - len(failed)}/{len(outcomes)} endpoints",
            {"failed": failed} if failed else None,
        )
        return outcomes

    @staticmethod
    async def _cancel(tasks) -> None:
        tasks = list(tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
