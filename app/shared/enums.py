"""Shared enumerations for the collection engine.

Cross-cutting enums used by application and presentation layers (query
operators, sort direction, mutation lifecycle). Domain-specific enums
(e.g. FieldType, AuditAction) live in app.domain.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class SortDirection(_ValuesMixin, str, Enum):
    """Direction of the single active sort."""

    ASC = "asc"
    DESC = "desc"


class NumberOperator(_ValuesMixin, str, Enum):
    """Comparison operator for number field filters."""

    EQ = "="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="


class MutationState(_ValuesMixin, str, Enum):
    """Lifecycle of one user-initiated mutation (terminal: committed, rejected)."""

    IDLE = "idle"
    VALIDATING = "validating"
    PERMISSION_CHECKING = "permission-checking"
    WRITING = "writing"
    AUDITING = "auditing"
    COMMITTED = "committed"
    REJECTED = "rejected"


class StoreBackend(_ValuesMixin, str, Enum):
    """Remote document store backend selected in settings."""

    FIRESTORE = "firestore"
    MEMORY = "memory"
