"""Field and document validation against a collection schema.

``validate_field`` checks one value against one rule and stops at the
first failure. ``validate_document`` runs every declared field and
collects all failures; its result is what gates a write.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, assert_never

from pydantic import AnyUrl, TypeAdapter, ValidationError

from app.application.dtos.validation import FieldError, ValidationResult
from app.domain.entities.schema import FieldDef, ValidationRule
from app.domain.field_types import FieldType
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

MSG_REQUIRED = "This field is required"
MSG_INVALID_FORMAT = "Invalid format"
MSG_INVALID_PATTERN = "Invalid validation pattern"
MSG_INVALID_EMAIL = "Invalid email address"
MSG_INVALID_URL = "Invalid URL"
MSG_INVALID_OPTION = "Value must be one of the declared options"

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


class _InvalidPattern:
    """Marker for a pattern that failed to compile."""


_INVALID_PATTERN = _InvalidPattern()


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str] | _InvalidPattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        logger.error("Invalid regex pattern %r: %s", pattern, e)
        return _INVALID_PATTERN


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


def is_valid_url(value: str) -> bool:
    """Strict absolute-URL check (scheme required)."""
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


def _check_bounds(
    field_name: str, value: Any, rule: ValidationRule, field_type: FieldType | None
) -> FieldError | None:
    if _is_number(value):
        if rule.min is not None and value < rule.min:
            return FieldError(field_name, f"Value must be at least {_fmt(rule.min)}")
        if rule.max is not None and value > rule.max:
            return FieldError(field_name, f"Value must be at most {_fmt(rule.max)}")
    elif field_type is FieldType.TEXT and isinstance(value, str):
        if rule.min is not None and len(value) < rule.min:
            return FieldError(
                field_name, f"Must be at least {_fmt(rule.min)} characters"
            )
        if rule.max is not None and len(value) > rule.max:
            return FieldError(
                field_name, f"Must be at most {_fmt(rule.max)} characters"
            )
    return None


def _fmt(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def validate_field(
    field_name: str,
    value: Any,
    rule: ValidationRule | None,
    field_type: FieldType | None = None,
) -> FieldError | None:
    """Validate one value against one rule; return the first failure or None.

    Order: required, empty-and-optional short circuit, bounds, pattern,
    email, url. Bounds are numeric for numbers; for text fields (when
    ``field_type`` is given) they bound the string length.
    """
    if rule is None:
        return None
    if _is_empty(value):
        if rule.required:
            return FieldError(field_name, MSG_REQUIRED)
        return None

    bounds_error = _check_bounds(field_name, value, rule, field_type)
    if bounds_error:
        return bounds_error

    if isinstance(value, str) and rule.pattern:
        compiled = _compile(rule.pattern)
        if isinstance(compiled, _InvalidPattern):
            return FieldError(field_name, MSG_INVALID_PATTERN)
        if not compiled.search(value):
            return FieldError(field_name, rule.pattern_error or MSG_INVALID_FORMAT)

    if rule.email and isinstance(value, str) and not is_valid_email(value):
        return FieldError(field_name, MSG_INVALID_EMAIL)

    if rule.url and isinstance(value, str) and not is_valid_url(value):
        return FieldError(field_name, MSG_INVALID_URL)

    return None


def _check_type(field: FieldDef, value: Any) -> FieldError | None:
    """Rules implied by the field's type, applied to non-empty values."""
    if _is_empty(value):
        return None
    match field.type:
        case FieldType.SELECT:
            if value not in field.options:
                return FieldError(field.name, MSG_INVALID_OPTION)
        case FieldType.EMAIL:
            if isinstance(value, str) and not is_valid_email(value):
                return FieldError(field.name, MSG_INVALID_EMAIL)
        case FieldType.URL:
            if isinstance(value, str) and not is_valid_url(value):
                return FieldError(field.name, MSG_INVALID_URL)
        case FieldType.TEXT | FieldType.NUMBER | FieldType.BOOLEAN | FieldType.DATE:
            pass
        case _:
            assert_never(field.type)
    return None


def validate_value(field: FieldDef, value: Any) -> FieldError | None:
    """Validate one value of a declared field (its rule, then its type)."""
    error = validate_field(field.name, value, field.validation, field.type)
    if error:
        return error
    return _check_type(field, value)


def validate_document(
    doc: dict[str, Any], fields: tuple[FieldDef, ...] | list[FieldDef]
) -> ValidationResult:
    """Validate every declared field of ``doc`` and collect all errors.

    Keys not declared in ``fields`` are ignored.
    """
    errors: list[FieldError] = []
    for field in fields:
        error = validate_value(field, doc.get(field.name))
        if error:
            errors.append(error)
    return ValidationResult(errors=tuple(errors))


def format_validation_errors(errors: tuple[FieldError, ...] | list[FieldError]) -> str:
    """Render errors as ``field: message`` lines."""
    return "\n".join(f"{e.field}: {e.message}" for e in errors)
