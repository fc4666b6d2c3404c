"""DTOs for field and document validation results."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FieldError:
    """One rule violation on one field."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ValidationResult:
    """Aggregate of all field errors for one document (declared-field order)."""

    errors: tuple[FieldError, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def errors_as_dicts(self) -> list[dict[str, str]]:
        return [e.to_dict() for e in self.errors]
