"""Domain entities.

Pure domain models; no persistence or presentation concerns.
"""

from app.domain.entities.audit import AuditChanges, AuditEntry
from app.domain.entities.document import CollectionDocument, CollectionSnapshot
from app.domain.entities.role import Role, RolePermissions, UserPermissions
from app.domain.entities.schema import CollectionSchema, FieldDef, ValidationRule

__all__ = [
    "AuditChanges",
    "AuditEntry",
    "CollectionDocument",
    "CollectionSchema",
    "CollectionSnapshot",
    "FieldDef",
    "Role",
    "RolePermissions",
    "UserPermissions",
    "ValidationRule",
]
