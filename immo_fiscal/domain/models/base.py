"""Shared model base for input and result records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from immo_fiscal.core.exceptions import ValidationError

M = TypeVar("M", bound="CoreModel")


class CoreModel(BaseModel):
    """Immutable record accepting snake_case or camelCase keys."""

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
        "extra": "ignore",
    }

    @classmethod
    def _field_name(cls, key: str) -> str:
        """Resolve an alias (camelCase or legacy key) to the field name."""
        for name, info in cls.model_fields.items():
            if key == name or key == info.alias:
                return name
            choices = getattr(info.validation_alias, "choices", None) or ()
            if key in choices:
                return name
        return key

    @classmethod
    def from_record(cls: type[M], record: M | Mapping[str, Any]) -> M:
        """Build a model from a persistence row, translating validation errors.

        Raises:
            ValidationError: naming the first offending field.
        """
        if isinstance(record, cls):
            return record
        try:
            return cls.model_validate(record)
        except pydantic.ValidationError as e:
            first = e.errors()[0]
            loc = first.get("loc", ())
            field = cls.__name__
            if loc:
                field = cls._field_name(str(loc[0]))
            raise ValidationError(field, first.get("input"), first.get("msg", "")) from None
