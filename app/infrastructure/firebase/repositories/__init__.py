"""Firestore-backed repository implementations (swappable with the memory backend)."""

from app.infrastructure.firebase.repositories.audit_log_repo_firestore import (
    FirestoreAuditLogRepository,
)
from app.infrastructure.firebase.repositories.document_store_firestore import (
    FirestoreDocumentStore,
)
from app.infrastructure.firebase.repositories.role_repo_firestore import (
    FirestoreAccessConfigRepository,
    FirestoreRoleRepository,
)
from app.infrastructure.firebase.repositories.schema_repo_firestore import (
    FirestoreSchemaRepository,
)

__all__ = [
    "FirestoreAccessConfigRepository",
    "FirestoreAuditLogRepository",
    "FirestoreDocumentStore",
    "FirestoreRoleRepository",
    "FirestoreSchemaRepository",
]
