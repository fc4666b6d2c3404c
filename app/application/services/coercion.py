"""Value coercion: raw editor/CSV input -> typed value a field stores.

This is the only place that parses field values; callers validate the
coerced value, not the raw input, so defaulting artifacts (e.g. "abc" -> 0)
are caught by the field's rules.
"""

from __future__ import annotations

import math
import re
from typing import Any, assert_never

from app.domain.entities.schema import FieldDef
from app.domain.field_types import FieldType

StoredValue = str | int | float | bool | None

# Longest numeric prefix, the way parseFloat reads "12.5kg" as 12.5.
_NUMBER_PREFIX_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Integral floats beyond this are kept as floats (int64-safe, exact in a double).
_MAX_SAFE_INTEGER = 2**53


def _normalize_number(value: float) -> int | float:
    if not math.isfinite(value):
        return 0
    if value.is_integer() and abs(value) <= _MAX_SAFE_INTEGER:
        return int(value)
    return value


def parse_number(raw: Any) -> int | float:
    """Parse a number like parseFloat; 0 when there is no numeric prefix. Never raises."""
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return _normalize_number(float(raw))
    if raw is None:
        return 0
    match = _NUMBER_PREFIX_RE.match(str(raw))
    if not match:
        return 0
    return _normalize_number(float(match.group(1)))


def parse_boolean(raw: Any) -> bool:
    """``"true"`` (any case) is True; everything else is False."""
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        return raw.strip().lower() == "true"
    return False


def display_value(value: Any) -> str:
    """Stringify a stored value the way the table, search and CSV export show it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(_normalize_number(value))
    return str(value)


def coerce_value(field: FieldDef, raw: Any) -> StoredValue:
    """Convert raw input to the value ``field`` stores.

    number -> parsed number (0 on failure); boolean -> True only for "true";
    every other type -> string (None becomes "").
    """
    match field.type:
        case FieldType.NUMBER:
            return parse_number(raw)
        case FieldType.BOOLEAN:
            return parse_boolean(raw)
        case (
            FieldType.TEXT
            | FieldType.SELECT
            | FieldType.DATE
            | FieldType.EMAIL
            | FieldType.URL
        ):
            return display_value(raw)
        case _:
            assert_never(field.type)


def default_raw_value(field: FieldDef) -> str:
    """Raw value a blank editor starts from (and missing create fields use)."""
    match field.type:
        case FieldType.BOOLEAN:
            return "false"
        case (
            FieldType.TEXT
            | FieldType.NUMBER
            | FieldType.SELECT
            | FieldType.DATE
            | FieldType.EMAIL
            | FieldType.URL
        ):
            return ""
        case _:
            assert_never(field.type)


def to_raw(field: FieldDef, value: Any) -> str:
    """Render a stored value back into editor input."""
    if value is None:
        return default_raw_value(field)
    return display_value(value)


def coerce_document(
    fields: tuple[FieldDef, ...] | list[FieldDef],
    raw_values: dict[str, Any],
    *,
    fill_missing: bool,
) -> dict[str, StoredValue]:
    """Coerce the declared fields present in ``raw_values``.

    With ``fill_missing`` every declared field is produced; absent ones
    coerce from the type's default raw value (create semantics).
    """
    out: dict[str, StoredValue] = {}
    for field in fields:
        if field.name in raw_values:
            out[field.name] = coerce_value(field, raw_values[field.name])
        elif fill_missing:
            out[field.name] = coerce_value(field, default_raw_value(field))
    return out
