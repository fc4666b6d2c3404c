"""Closed set of field types a collection schema may declare.

Every per-type behaviour in the engine is written as a ``match`` over
FieldType that ends in ``assert_never``, so adding a member without
handling it everywhere is a type-checking error.
"""

from enum import Enum
from typing import assert_never


class FieldType(str, Enum):
    """Declared type of one schema field."""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    DATE = "date"
    EMAIL = "email"
    URL = "url"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid type names as strings."""
        return [field_type.value for field_type in cls]


def render_hint(field_type: FieldType) -> str:
    """Return the input widget the presentation layer should render."""
    match field_type:
        case FieldType.TEXT:
            return "text"
        case FieldType.NUMBER:
            return "number"
        case FieldType.BOOLEAN:
            return "switch"
        case FieldType.SELECT:
            return "select"
        case FieldType.DATE:
            return "date"
        case FieldType.EMAIL:
            return "email"
        case FieldType.URL:
            return "url"
        case _:
            assert_never(field_type)


def is_numeric(field_type: FieldType) -> bool:
    """Return True when values of this type compare numerically."""
    match field_type:
        case FieldType.NUMBER:
            return True
        case (
            FieldType.TEXT
            | FieldType.BOOLEAN
            | FieldType.SELECT
            | FieldType.DATE
            | FieldType.EMAIL
            | FieldType.URL
        ):
            return False
        case _:
            assert_never(field_type)
