"""Fetch layer types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FetchError(Exception):
    """Base class for fetch layer errors."""


class TransportError(FetchError):
    """A single attempt failed at the transport or HTTP status level."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(FetchError):
    """A single attempt returned a body that is not valid JSON."""


class FetchExhausted(FetchError):
    """Every allowed attempt for an endpoint failed."""

    def __init__(self, endpoint: str, attempts: int) -> None:
        super().__init__(f"Failed to fetch data from {endpoint} after {attempts} attempts")
        self.endpoint = endpoint
        self.attempts = attempts


CANCELLED = "Cancelled"


class FetchRequest(BaseModel):
    """A named request for one endpoint of the API."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str = Field(..., min_length=1, description="Dataset name, unique within a batch")
    endpoint: str = Field(..., min_length=1, description="Path below the API base URL")
    params: dict[str, str] = Field(default_factory=dict, description="Query parameters")

    @field_validator("params", mode="before")
    @classmethod
    def stringify_params(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(k): str(val) for k, val in v.items()}
        return v

    @classmethod
    def batch_from_config(cls, requests: dict[str, dict[str, Any]]) -> list[FetchRequest]:
        """Build a batch from a ``{key: {endpoint, params}}`` mapping."""
        return [
            cls(key=key, endpoint=spec.get("endpoint", key), params=spec.get("params") or {})
            for key, spec in requests.items()
        ]


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class FetchSuccess:
    key: str
    payload: list[Any] = field(default_factory=list)
    status: Literal["success"] = "success"

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class FetchFailure:
    key: str
    reason: str
    error: str = FetchExhausted.__name__
    status: Literal["failure"] = "failure"

    @property
    def ok(self) -> bool:
        return False

    @property
    def cancelled(self) -> bool:
        return self.error == CANCELLED


FetchOutcome = FetchSuccess | FetchFailure


def as_payload(data: Any) -> list[Any]:
    """Normalise a decoded JSON body to a list of items."""
    if data is None:
        return []
    if isinstance(data, list):
        return data
    return [data]
