"""Domain layer: entities, field types, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import (
    AuditChanges,
    AuditEntry,
    CollectionDocument,
    CollectionSchema,
    CollectionSnapshot,
    FieldDef,
    Role,
    RolePermissions,
    UserPermissions,
    ValidationRule,
)
from app.domain.enums import AuditAction, Capability
from app.domain.exceptions import (
    AuditWriteException,
    AuthenticationException,
    AuthorizationException,
    DocAdminException,
    HeaderMismatchException,
    ResourceNotFoundException,
    RoleAlreadyExistsException,
    SchemaLoadException,
    StoreException,
    ValidationException,
    WriteException,
)
from app.domain.field_types import FieldType

__all__ = [
    # Entities
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
    # Enums
    "AuditAction",
    "Capability",
    "FieldType",
    # Exceptions
    "AuditWriteException",
    "AuthenticationException",
    "AuthorizationException",
    "DocAdminException",
    "HeaderMismatchException",
    "ResourceNotFoundException",
    "RoleAlreadyExistsException",
    "SchemaLoadException",
    "StoreException",
    "ValidationException",
    "WriteException",
]
