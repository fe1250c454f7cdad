"""HTTP fetch layer: transport, retries and concurrent batches."""

from .client import RetryingFetcher
from .config import FetchConfig
from .coordinator import ParallelFetchCoordinator
from .transport import HttpTransport, HttpxTransport, build_url
from .types import (
    DecodeError,
    FetchError,
    FetchExhausted,
    FetchFailure,
    FetchOutcome,
    FetchRequest,
    FetchSuccess,
    HttpResponse,
    TransportError,
)

__all__ = [
    "DecodeError",
    "FetchConfig",
    "FetchError",
    "FetchExhausted",
    "FetchFailure",
    "FetchOutcome",
    "FetchRequest",
    "FetchSuccess",
    "HttpResponse",
    "HttpTransport",
    "HttpxTransport",
    "ParallelFetchCoordinator",
    "RetryingFetcher",
    "TransportError",
    "build_url",
]
