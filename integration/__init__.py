"""Parallel JSON API collection, record validation and cross-dataset analysis."""

from .service import CollectionError, DataIntegrationService, PipelineReport

__all__ = ["CollectionError", "DataIntegrationService", "PipelineReport"]
