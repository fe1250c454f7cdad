"""Collection, preprocessing and analysis pipeline."""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass

from integration.analysis import AnalysisEngine, AnalysisResult
from integration.common.config import RootConfig
from integration.common.events import EventLogger, LogSink
from integration.fetch import FetchRequest, HttpTransport, ParallelFetchCoordinator, RetryingFetcher
from integration.processor import DataProcessor, ProcessedDataset


class CollectionError(RuntimeError):
    """No endpoint of a non-empty batch could be fetched."""


@dataclass
class PipelineReport:
    results: AnalysisResult
    dataset: ProcessedDataset
    elapsed: float


class DataIntegrationService:
    """Collects endpoint data, validates it and runs the analysis."""

    def __init__(
        self,
        coordinator: ParallelFetchCoordinator,
        processor: DataProcessor | None = None,
        engine: AnalysisEngine | None = None,
        logger: EventLogger | None = None,
    ) -> None:
        self.coordinator = coordinator
        self.processor = processor or DataProcessor()
        self.engine = engine or AnalysisEngine()
        self.logger = logger or LogSink(__name__)

    @classmethod
    def from_config(
        cls,
        config: RootConfig,
        transport: HttpTransport | None = None,
        logger: EventLogger | None = None,
    ) -> DataIntegrationService:
        """Build the pipeline from a validated root configuration."""
        fetcher = RetryingFetcher.from_config(config.fetch, transport=transport, logger=logger)
        return cls(
            coordinator=ParallelFetchCoordinator(fetcher, logger=logger),
            processor=DataProcessor(logger=logger),
            engine=AnalysisEngine.from_config(config.analysis),
            logger=logger,
        )

    async def collect_and_process(self, requests: Sequence[FetchRequest]) -> ProcessedDataset:
        """Fetch every request concurrently and validate the payloads."""
        self.logger.info("Data collection and preprocessing started")

        outcomes = await self.coordinator.fetch_all(requests)
        if outcomes and not any(outcome.ok for outcome in outcomes.values()):
            self.logger.critical("Data collection failed for every endpoint")
            raise CollectionError(f"Data collection failed for all {len(outcomes)} endpoint(s)")
        self.logger.info("Raw data collection completed")

        return self.processor.process(outcomes)

    def perform_analysis(self, dataset: ProcessedDataset) -> AnalysisResult:
        self.logger.info("Analysis started")
        results = self.engine.analyze(dataset)
        self.logger.info("Analysis completed", {"metrics": list(results)})
        return results

    async def run(self, requests: Sequence[FetchRequest]) -> PipelineReport:
        """Run the whole pipeline and time it."""
        start = time.perf_counter()
        self.logger.info("--- Pipeline started ---")

        dataset = await self.collect_and_process(requests)
        results = self.perform_analysis(dataset)

        elapsed = time.perf_counter() - start
        self.logger.info("--- Pipeline completed ---")
        self.logger.info(f"Total execution time: {elapsed:.2f}s")
        return PipelineReport(results=results, dataset=dataset, elapsed=elapsed)

    async def close(self) -> None:
        await self.coordinator.fetcher.close()

    async def __aenter__(self) -> DataIntegrationService:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
