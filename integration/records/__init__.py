from .models import Post, Record, User
from .validator import IncompleteRecord, InvalidEmail, RecordError, RecordValidator

__all__ = [
    "IncompleteRecord",
    "InvalidEmail",
    "Post",
    "Record",
    "RecordError",
    "RecordValidator",
    "User",
]
