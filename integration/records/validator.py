"""Raw item validation."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import pydantic

from integration.records.models import Post, Record, User

R = TypeVar("R", bound=Record)
Validator = Callable[[Any], Record]


class RecordError(ValueError):
    """A raw item could not be turned into a record."""


class IncompleteRecord(RecordError):
    """A required field is missing or has the wrong type."""


class InvalidEmail(RecordError):
    """The email field is not a syntactically valid address."""


def _build(model: type[R], raw: Any) -> R:
    label = model.__name__
    if not isinstance(raw, dict):
        raise IncompleteRecord(f"{label} data is not an object")

    missing = [key for key in model.required_keys() if raw.get(key) is None]
    if missing:
        raise IncompleteRecord(f"{label} data is incomplete, missing: {', '.join(missing)}")

    try:
        return model.model_validate(raw)
    except pydantic.ValidationError as e:
        if any(err["loc"][:1] == ("email",) for err in e.errors()):
            raise InvalidEmail(f"Invalid email format for {label.lower()} ID {raw.get('id')}") from e
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        raise IncompleteRecord(f"{label} data has invalid fields: {', '.join(fields)}") from e


class RecordValidator:
    """Maps endpoint keys to validator functions.

    Keys without a registered validator are pass-through datasets.
    """

    def __init__(self) -> None:
        self._registry: dict[str, Validator] = {
            "users": self.to_user,
            "posts": self.to_post,
        }

    @staticmethod
    def to_user(raw: Any) -> User:
        return _build(User, raw)

    @staticmethod
    def to_post(raw: Any) -> Post:
        return _build(Post, raw)

    def register(self, key: str, validator: Validator | None = None) -> Any:
        """Register a validator for ``key``; usable as a decorator."""

        def wrapper(func: Validator) -> Validator:
            self._registry[key] = func
            return func

        return wrapper(validator) if validator is not None else wrapper

    def validator_for(self, key: str) -> Validator | None:
        return self._registry.get(key)

    @property
    def keys(self) -> set[str]:
        return set(self._registry)
