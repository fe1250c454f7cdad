"""Fetch layer configuration."""

from __future__ import annotations

import os
from urllib.parse import urlparse

from pydantic import Field, field_validator, model_validator

from integration.common.config import BaseConfig

BASE_URL_ENV = "DATA_API_BASE_URL"


class FetchConfig(BaseConfig):
    """HTTP fetch configuration."""

    base_url: str = Field(
        default="https://jsonplaceholder.typicode.com",
        description="API base URL",
    )
    timeout: float = Field(
        default=10.0,
        description="Per-attempt request timeout in seconds",
        gt=0,
    )
    max_retries: int = Field(
        default=3,
        description="Maximum number of attempts per request",
        ge=1,
    )
    backoff_base: float = Field(
        default=0.5,
        description="Delay before the first retry; doubles for every further retry",
        ge=0,
    )
    max_concurrency: int | None = Field(
        default=None,
        description="Cap on requests in flight at once",
        ge=1,
    )
    deadline_seconds: float | None = Field(
        default=None,
        description="Batch-wide deadline; unfinished requests are cancelled",
        gt=0,
    )
    user_agent: str = Field(
        default="data-integration/0.1",
        description="User-Agent header",
    )

    @model_validator(mode="before")
    @classmethod
    def apply_env_override(cls, values: dict) -> dict:
        if isinstance(values, dict) and (base_url := os.getenv(BASE_URL_ENV)):
            values = {**values, "base_url": base_url}
        return values

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        parsed = urlparse(v.strip())
        if parsed.scheme not in ("http", "https"):
            raise ValueError("URL must use http or https scheme")
        if not parsed.netloc:
            raise ValueError("URL must have a valid host")
        return v.strip().rstrip("/")
