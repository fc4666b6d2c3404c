"""Collection schema domain model (FieldDef, ValidationRule, CollectionSchema).

Schemas are declared at runtime by the schema registry and stored as a
``fields`` array on the collection's config document. The engine only reads
them. Parsing validates the stored structure with jsonschema; anything that
does not parse makes the whole schema unreadable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import jsonschema

from app.domain.exceptions import SchemaLoadException
from app.domain.field_types import FieldType

_NULLABLE_NUMBER = {"type": ["number", "null"]}
_NULLABLE_STRING = {"type": ["string", "null"]}

FIELD_DEFINITIONS_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["name", "type"],
        "properties": {
            "name": {"type": "string", "minLength": 1},
            "type": {"enum": FieldType.values()},
            "options": {
                "type": ["array", "null"],
                "items": {"type": "string"},
            },
            "validation": {
                "type": ["object", "null"],
                "properties": {
                    "required": {"type": ["boolean", "null"]},
                    "min": _NULLABLE_NUMBER,
                    "max": _NULLABLE_NUMBER,
                    "pattern": _NULLABLE_STRING,
                    "patternError": _NULLABLE_STRING,
                    "email": {"type": ["boolean", "null"]},
                    "url": {"type": ["boolean", "null"]},
                },
            },
            "description": _NULLABLE_STRING,
            "order": _NULLABLE_NUMBER,
        },
    },
}


@dataclass(frozen=True)
class ValidationRule:
    """Validation switches for one field.

    ``min``/``max`` bound the magnitude of number fields and the character
    length of text fields; callers branch on the field type.
    """

    required: bool = False
    min: float | None = None
    max: float | None = None
    pattern: str | None = None
    pattern_error: str | None = None
    email: bool = False
    url: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationRule:
        return cls(
            required=bool(data.get("required")),
            min=data.get("min"),
            max=data.get("max"),
            pattern=data.get("pattern") or None,
            pattern_error=data.get("patternError") or None,
            email=bool(data.get("email")),
            url=bool(data.get("url")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "required": self.required,
            "min": self.min,
            "max": self.max,
            "pattern": self.pattern,
            "patternError": self.pattern_error,
            "email": self.email,
            "url": self.url,
        }


@dataclass(frozen=True)
class FieldDef:
    """One schema entry. Options are required and non-empty iff type is select."""

    name: str
    type: FieldType
    options: tuple[str, ...] = ()
    validation: ValidationRule | None = None
    description: str | None = None
    order: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Field name must be a non-empty string")
        if self.type is FieldType.SELECT and not self.options:
            raise ValueError(f"Select field '{self.name}' must declare options")
        if self.type is not FieldType.SELECT and self.options:
            raise ValueError(f"Only select fields may declare options ('{self.name}')")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FieldDef:
        """Build from a stored field dict (already structure-checked).

        Options stored on non-select fields are dropped; the registry UI
        leaves an empty list behind when a field's type changes.
        """
        field_type = FieldType(data["type"])
        options = tuple(data.get("options") or ())
        if field_type is not FieldType.SELECT:
            options = ()
        validation = data.get("validation")
        return cls(
            name=data["name"],
            type=field_type,
            options=options,
            validation=ValidationRule.from_dict(validation) if validation else None,
            description=data.get("description") or None,
            order=int(data.get("order") or 0),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "order": self.order,
        }
        if self.options:
            out["options"] = list(self.options)
        if self.validation is not None:
            out["validation"] = self.validation.to_dict()
        if self.description:
            out["description"] = self.description
        return out


@dataclass(frozen=True)
class CollectionSchema:
    """Ordered field list for one collection (display and edit order)."""

    collection: str
    fields: tuple[FieldDef, ...] = ()

    @classmethod
    def empty(cls, collection: str) -> CollectionSchema:
        return cls(collection=collection, fields=())

    @classmethod
    def from_field_dicts(cls, collection: str, raw_fields: Any) -> CollectionSchema:
        """Parse and order a stored ``fields`` array.

        Fields are sorted by ``order`` (missing counts as 0); the sort is
        stable so ties keep declaration order.

        Raises:
            SchemaLoadException: Structure invalid, select without options,
                or duplicate field names.
        """
        try:
            jsonschema.validate(instance=raw_fields, schema=FIELD_DEFINITIONS_SCHEMA)
        except jsonschema.ValidationError as e:
            raise SchemaLoadException(collection, e.message) from e
        try:
            parsed = [FieldDef.from_dict(item) for item in raw_fields]
        except ValueError as e:
            raise SchemaLoadException(collection, str(e)) from e
        seen: set[str] = set()
        for field_def in parsed:
            if field_def.name in seen:
                raise SchemaLoadException(
                    collection, f"duplicate field name '{field_def.name}'"
                )
            seen.add(field_def.name)
        ordered = sorted(parsed, key=lambda f: f.order)
        return cls(collection=collection, fields=tuple(ordered))

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def field(self, name: str) -> FieldDef | None:
        """Return the declared field with this name, or None."""
        for field_def in self.fields:
            if field_def.name == name:
                return field_def
        return None


USERS_COLLECTION = "users"

# The users collection is not declared in the registry; its shape is fixed.
USERS_SCHEMA = CollectionSchema(
    collection=USERS_COLLECTION,
    fields=(
        FieldDef(name="name", type=FieldType.TEXT, order=0),
        FieldDef(name="email", type=FieldType.TEXT, order=1),
        FieldDef(
            name="role",
            type=FieldType.SELECT,
            options=("admin", "editor", "viewer"),
            order=2,
        ),
    ),
)
