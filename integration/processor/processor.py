"""Turns fetch outcomes into validated datasets."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from integration.common.events import EventLogger, LogSink
from integration.fetch.types import FetchOutcome, FetchSuccess
from integration.records.models import Record
from integration.records.validator import RecordError, RecordValidator

# kept as raw items without a warning
PASSTHROUGH_KEYS = frozenset({"comments"})


@dataclass
class ProcessedDataset(Mapping[str, list[Any]]):
    """Processed records by endpoint key.

    Only keys with at least one item are part of the mapping. Keys whose
    payload was empty (or fully rejected) are listed in ``skipped``; keys
    whose fetch failed are listed in ``failed``.
    """

    records: dict[str, list[Any]] = field(default_factory=dict)
    skipped: dict[str, str] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)
    rejected: dict[str, int] = field(default_factory=dict)

    def __getitem__(self, key: str) -> list[Any]:
        return self.records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def status(self, key: str) -> str | None:
        """Return ``present``, ``skipped``, ``failed`` or None for unknown keys."""
        if key in self.records:
            return "present"
        if key in self.skipped:
            return "skipped"
        if key in self.failed:
            return "failed"
        return None


class DataProcessor:
    """Validates each endpoint payload, isolating failures per item."""

    def __init__(
        self,
        validator: RecordValidator | None = None,
        logger: EventLogger | None = None,
    ) -> None:
        self.validator = validator or RecordValidator()
        self.logger = logger or LogSink(__name__)

    def process(self, outcomes: Mapping[str, FetchOutcome]) -> ProcessedDataset:
        """Build a ProcessedDataset from fetch outcomes."""
        self.logger.info("Data preprocessing started")
        dataset = ProcessedDataset()

        for key, outcome in outcomes.items():
            if not isinstance(outcome, FetchSuccess):
                self.logger.critical(
                    f"Endpoint '{key}' failed, dataset unavailable: {outcome.reason}",
                    {"error": outcome.error},
                )
                dataset.failed[key] = outcome.reason
                continue

            if not outcome.payload:
                self.logger.warning(f"Endpoint '{key}' returned no data, skipping preprocessing")
                dataset.skipped[key] = "empty payload"
                continue

            items = self._process_items(key, outcome.payload, dataset)
            if not items:
                self.logger.warning(f"Every item from '{key}' was rejected, skipping dataset")
                dataset.skipped[key] = "no valid records"
                continue

            dataset.records[key] = items

        self.logger.info(
            "Data preprocessing completed",
            {
                "present": list(dataset.records),
                "skipped": list(dataset.skipped),
                "failed": list(dataset.failed),
            },
        )
        return dataset

    def _process_items(self, key: str, payload: list[Any], dataset: ProcessedDataset) -> list[Any]:
        validate = self.validator.validator_for(key)
        if validate is None:
            if key not in PASSTHROUGH_KEYS:
                self.logger.warning(f"Unknown data type '{key}', keeping raw data")
            self.logger.info(f"Stored {len(payload)} raw item(s) for '{key}'")
            return list(payload)

        items: list[Record] = []
        for index, raw in enumerate(payload):
            try:
                items.append(validate(raw))
            except RecordError as e:
                self.logger.error(
                    f"Data validation failed ({key}): {e}", {"index": index}
                )
                dataset.rejected[key] = dataset.rejected.get(key, 0) + 1

        self.logger.info(f"Validated {len(items)}/{len(payload)} item(s) for '{key}'")
        return items
