"""Domain enumerations for the collection engine.

Enums represent fixed sets of domain values (audit actions, role
capabilities).
"""

from enum import Enum


class AuditAction(str, Enum):
    """Kind of document mutation recorded in the audit trail."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid action values as strings."""
        return [action.value for action in cls]


class Capability(str, Enum):
    """The four boolean capabilities a role grants (stored camelCase)."""

    VIEW = "canView"
    EDIT = "canEdit"
    DELETE = "canDelete"
    MANAGE_ROLES = "canManageRoles"

    @classmethod
    def values(cls) -> list[str]:
        """Return all capability keys as stored in role documents."""
        return [capability.value for capability in cls]
