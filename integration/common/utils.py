from __future__ import annotations

import json
from datetime import datetime

from pydantic import BaseModel


class RecordEncoder(json.JSONEncoder):
    def default(self, o):
        # validated records
        if isinstance(o, BaseModel):
            return o.model_dump(by_alias=True)

        # Handle datetime
        if isinstance(o, datetime):
            return o.isoformat()

        # Handle bytes
        elif isinstance(o, bytes):
            try:
                return o.decode("utf-8")
            except UnicodeDecodeError:
                return o.hex()

        elif isinstance(o, set | frozenset):
            return sorted(o)

        # Handle other types by falling back to the parent method
        return super().default(o)


def to_json(value: object, *, indent: int | None = 2) -> str:
    """Serialise an analysis result or dataset for output."""
    return json.dumps(value, cls=RecordEncoder, indent=indent, ensure_ascii=False)
