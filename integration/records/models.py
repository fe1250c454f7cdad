"""Validated record types."""

from __future__ import annotations

import re
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")


def coerce_int(value: Any) -> int:
    """Coerce a JSON number or numeric string to int."""
    if isinstance(value, bool):
        raise ValueError("boolean is not a numeric value")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            number = None
        if number is not None and number.is_integer():
            return int(number)
    raise ValueError(f"not a numeric value: {value!r}")


Integer = Annotated[int, BeforeValidator(coerce_int)]


def coerce_text(value: Any) -> str:
    """Accept JSON strings and numbers as text."""
    if isinstance(value, str):
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    raise ValueError(f"not a text value: {value!r}")


Text = Annotated[str, BeforeValidator(coerce_text)]


class Record(BaseModel):
    """Base for records built from raw API items."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @classmethod
    def required_keys(cls) -> list[str]:
        """Raw keys that must be present and non-null."""
        return [
            field.alias or name for name, field in cls.model_fields.items() if field.is_required()
        ]


class User(Record):
    """An API user."""

    id: Integer
    name: Text
    email: Text
    username: Text

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not EMAIL_PATTERN.fullmatch(v):
            raise ValueError("invalid email format")
        return v


class Post(Record):
    """A post written by a user; ``user_id`` is not checked against users."""

    id: Integer
    user_id: Integer = Field(..., alias="userId")
    title: Text
    body: Text
