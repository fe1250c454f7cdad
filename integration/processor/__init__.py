from .processor import DataProcessor, ProcessedDataset

__all__ = ["DataProcessor", "ProcessedDataset"]
