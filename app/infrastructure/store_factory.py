"""Store factory: builds the repository set for the configured backend."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.application.interfaces.repositories import (
    IAccessConfigRepository,
    IAuditLogRepository,
    IDocumentStore,
    IRoleRepository,
    ISchemaRepository,
)
from app.shared.enums import StoreBackend

if TYPE_CHECKING:
    from app.core.config import Settings
    from app.infrastructure.firebase._rest_client import FirestoreRESTClient
    from app.infrastructure.memory.store import MemoryDatabase


@dataclass(frozen=True)
class StoreRepositories:
    """Every repository the engine needs, sharing one backend."""

    documents: IDocumentStore
    schemas: ISchemaRepository
    roles: IRoleRepository
    access_config: IAccessConfigRepository
    audit_log: IAuditLogRepository


class StoreFactory:
    """Factory for repository sets based on configuration."""

    @staticmethod
    def create_repositories(
        settings: "Settings | None" = None,
        *,
        firestore_client: "FirestoreRESTClient | None" = None,
        memory_db: "MemoryDatabase | None" = None,
    ) -> StoreRepositories:
        """Create repositories from settings.

        Args:
            settings: Application settings; if None, uses get_settings().
            firestore_client: Initialized client (required for 'firestore').
            memory_db: Shared state for 'memory'; a new one when omitted.

        Raises:
            ValueError: Unknown backend or missing Firestore client.
        """
        from app.core.config import get_settings

        s = settings or get_settings()
        if s.store_backend is StoreBackend.MEMORY:
            from app.infrastructure.memory.store import (
                InMemoryAccessConfigRepository,
                InMemoryAuditLogRepository,
                InMemoryDocumentStore,
                InMemoryRoleRepository,
                InMemorySchemaRepository,
                MemoryDatabase,
            )

            db = memory_db if memory_db is not None else MemoryDatabase()
            return StoreRepositories(
                documents=InMemoryDocumentStore(db),
                schemas=InMemorySchemaRepository(db),
                roles=InMemoryRoleRepository(db),
                access_config=InMemoryAccessConfigRepository(db),
                audit_log=InMemoryAuditLogRepository(db),
            )
        if s.store_backend is StoreBackend.FIRESTORE:
            if firestore_client is None:
                raise ValueError("Firestore backend requires an initialized client")
            from app.infrastructure.firebase.repositories import (
                FirestoreAccessConfigRepository,
                FirestoreAuditLogRepository,
                FirestoreDocumentStore,
                FirestoreRoleRepository,
                FirestoreSchemaRepository,
            )

            return StoreRepositories(
                documents=FirestoreDocumentStore(firestore_client),
                schemas=FirestoreSchemaRepository(
                    firestore_client, s.schema_collection_path
                ),
                roles=FirestoreRoleRepository(firestore_client, s.roles_collection),
                access_config=FirestoreAccessConfigRepository(
                    firestore_client, s.users_collection, s.app_config_document
                ),
                audit_log=FirestoreAuditLogRepository(
                    firestore_client, s.audit_collection
                ),
            )
        raise ValueError(
            f"Unknown store backend: {s.store_backend!r}. Supported: {StoreBackend.values()}"
        )
