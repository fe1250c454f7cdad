from .engine import AnalysisConfig, AnalysisEngine, AnalysisResult

__all__ = ["AnalysisConfig", "AnalysisEngine", "AnalysisResult"]
