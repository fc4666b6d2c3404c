"""In-process store backend (development and tests)."""

from app.infrastructure.memory.store import (
    InMemoryAccessConfigRepository,
    InMemoryAuditLogRepository,
    InMemoryDocumentStore,
    InMemoryRoleRepository,
    InMemorySchemaRepository,
    MemoryDatabase,
)

__all__ = [
    "InMemoryAccessConfigRepository",
    "InMemoryAuditLogRepository",
    "InMemoryDocumentStore",
    "InMemoryRoleRepository",
    "InMemorySchemaRepository",
    "MemoryDatabase",
]
