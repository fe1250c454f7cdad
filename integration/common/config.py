"""Common configuration classes."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BaseConfig(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        from_attributes=True,
    )


class LoggingConfig(BaseConfig):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        description="Root log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log record format",
    )
    filename: str | None = Field(
        default=None,
        description="Optional rotating log file",
    )
    max_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Rotate the log file after this many bytes",
        ge=1,
    )
    backup_count: int = Field(
        default=5,
        description="Number of rotated log files to keep",
        ge=0,
    )


class RootConfig(BaseConfig):
    """Root configuration."""

    fetch: dict[str, Any] = Field(
        ...,
        description="Fetch layer configuration",
    )
    requests: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Endpoint batch, keyed by dataset name",
    )
    analysis: dict[str, Any] = Field(
        default_factory=dict,
        description="Analysis configuration",
    )
    logging: LoggingConfig | None = Field(
        default=None,
        description="Logging configuration",
    )

    @model_validator(mode="after")
    def configure_logging(self) -> RootConfig:
        """Apply the logging section, if any."""
        if self.logging:
            self.setup_logging(self.logging)
        return self

    @classmethod
    def setup_logging(cls, config: LoggingConfig) -> None:
        """Setup logging based on configuration."""
        logging.basicConfig(level=config.level, format=config.format)

        if config.filename:
            handler = RotatingFileHandler(
                filename=config.filename,
                maxBytes=config.max_bytes,
                backupCount=config.backup_count,
            )
            handler.setFormatter(logging.Formatter(config.format))
            logging.getLogger().addHandler(handler)


TConf = TypeVar("TConf", bound=BaseConfig)
