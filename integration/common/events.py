"""Leveled event logging with structured context."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol, runtime_checkable

from integration.common.utils import RecordEncoder


@runtime_checkable
class EventLogger(Protocol):
    """Leveled message sink accepting an optional context mapping."""

    def info(self, message: str, context: dict[str, Any] | None = None) -> None: ...

    def warning(self, message: str, context: dict[str, Any] | None = None) -> None: ...

    def error(self, message: str, context: dict[str, Any] | None = None) -> None: ...

    def critical(self, message: str, context: dict[str, Any] | None = None) -> None: ...


class LogSink:
    """EventLogger backed by a stdlib logger."""

    def __init__(self, logger: logging.Logger | str) -> None:
        if isinstance(logger, str):
            logger = logging.getLogger(logger)
        self._logger = logger

    def info(self, message: str, context: dict[str, Any] | None = None) -> None:
        self._log(logging.INFO, message, context)

    def warning(self, message: str, context: dict[str, Any] | None = None) -> None:
        self._log(logging.WARNING, message, context)

    def error(self, message: str, context: dict[str, Any] | None = None) -> None:
        self._log(logging.ERROR, message, context)

    def critical(self, message: str, context: dict[str, Any] | None = None) -> None:
        self._log(logging.CRITICAL, message, context)

    def _log(self, level: int, message: str, context: dict[str, Any] | None) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if context:
            message = f"{message} {json.dumps(context, cls=RecordEncoder, ensure_ascii=False)}"
        self._logger.log(level, message, extra={"context": context or {}})
