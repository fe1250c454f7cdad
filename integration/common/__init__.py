from .config import BaseConfig, LoggingConfig, RootConfig
from .events import EventLogger, LogSink
from .utils import RecordEncoder, to_json

__all__ = [
    "BaseConfig",
    "EventLogger",
    "LogSink",
    "LoggingConfig",
    "RecordEncoder",
    "RootConfig",
    "to_json",
]
