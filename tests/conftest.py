"""Pytest configuration."""

from __future__ import annotations

import asyncio
import json
from typing import Any
from urllib.parse import urlparse

import pytest

from integration.fetch import FetchConfig, HttpResponse

pytest_plugins = ["pytest_asyncio"]


def respond(data: Any, status_code: int = 200) -> HttpResponse:
    """JSON response with the given status."""
    return HttpResponse(status_code=status_code, body=json.dumps(data).encode())


class FakeTransport:
    """Scripted HttpTransport keyed by endpoint path.

    Each endpoint maps to a list of steps (HttpResponse or exception); steps
    are consumed in order and the last one repeats.
    """

    def __init__(
        self,
        script: dict[str, list[Any]],
        delays: dict[str, float] | None = None,
    ) -> None:
        self.script = {k: list(v) for k, v in script.items()}
        self.delays = delays or {}
        self.calls: list[str] = []
        self.cancelled: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def calls_for(self, endpoint: str) -> int:
        return sum(1 for url in self.calls if urlparse(url).path.strip("/") == endpoint)

    async def get(self, url: str, timeout: float) -> HttpResponse:
        endpoint = urlparse(url).path.strip("/")
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(endpoint, 0))
        except asyncio.CancelledError:
            self.cancelled.append(endpoint)
            raise
        finally:
            self.in_flight -= 1

        steps = self.script[endpoint]
        step = steps.pop(0) if len(steps) > 1 else steps[0]
        if isinstance(step, BaseException):
            raise step
        return step


class RecordingLogger:
    """EventLogger test double."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any] | None]] = []

    def info(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.records.append(("info", message, context))

    def warning(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.records.append(("warning", message, context))

    def error(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.records.append(("error", message, context))

    def critical(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.records.append(("critical", message, context))

    def messages(self, level: str) -> list[str]:
        return [message for lvl, message, _ in self.records if lvl == level]


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fetch_config() -> FetchConfig:
    """Fetch config pointing at a fake host."""
    return FetchConfig(
        base_url="https://api.test",
        timeout=1.0,
        max_retries=3,
        backoff_base=0.5,
    )


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_transport():
    """Factory for scripted transports."""
    return FakeTransport


@pytest.fixture
def ok():
    """Builder for JSON responses."""
    return respond


@pytest.fixture
def users_payload() -> list[dict[str, Any]]:
    return [
        {"id": 1, "name": "Leanne Graham", "email": "Sincere@april.biz", "username": "Bret"},
        {"id": 2, "name": "Ervin Howell", "email": "Shanna@melissa.tv", "username": "Antonette"},
    ]


@pytest.fixture
def posts_payload() -> list[dict[str, Any]]:
    return [
        {"id": 1, "userId": 1, "title": "short", "body": "x" * 50},
        {"id": 2, "userId": 1, "title": "long", "body": "y" * 150},
        {"id": 3, "userId": 2, "title": "edge", "body": "z" * 101},
    ]
