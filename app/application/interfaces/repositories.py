"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain entities only; no infrastructure imports.
Every method is a suspension point (remote store call).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.audit_log import AuditEntryCreate
    from app.application.dtos.batch import BatchOperation
    from app.domain.entities.audit import AuditEntry
    from app.domain.entities.document import CollectionDocument


class IDocumentStore(Protocol):
    """Protocol for the remote document store addressed by (collection, id)."""

    async def list_documents(self, collection: str) -> list[CollectionDocument]:
        """Return every document of the collection."""

    async def get_document(
        self, collection: str, document_id: str
    ) -> CollectionDocument | None:
        """Return one document, or None if it does not exist."""

    def new_document_id(self, collection: str) -> str:
        """Return a fresh store id for a document about to be created."""

    async def commit(self, collection: str, operations: list[BatchOperation]) -> None:
        """Apply all operations atomically; raise on rejection (nothing applied)."""


class ISchemaRepository(Protocol):
    """Protocol for reading collection schemas written by the schema registry."""

    async def get_fields(self, collection: str) -> list[Any] | None:
        """Return the stored ``fields`` array, or None when no schema document exists."""

    async def list_collections(self) -> list[str]:
        """Return names of collections that have a schema document."""


class IRoleRepository(Protocol):
    """Protocol for role documents (``roles/{name}``)."""

    async def get_role(self, name: str) -> dict[str, Any] | None:
        """Return the raw role document, or None."""

    async def list_roles(self) -> dict[str, dict[str, Any]]:
        """Return all raw role documents keyed by role name."""

    async def save_role(self, name: str, data: dict[str, Any]) -> None:
        """Create or replace a role document."""

    async def delete_role(self, name: str) -> None:
        """Delete a role document (no-op if missing)."""


class IAccessConfigRepository(Protocol):
    """Protocol for user role assignments and global app settings (default role, title)."""

    async def get_user_role(self, user_id: str) -> str | None:
        """Return the role assigned to the user, or None."""

    async def get_default_role(self) -> str | None:
        """Return the configured default role, or None when unset."""

    async def set_default_role(self, role: str) -> None:
        """Persist the global default role."""

    async def get_app_title(self) -> str | None:
        """Return the configured application title, or None when unset."""

    async def set_app_title(self, title: str) -> None:
        """Persist the application title next to the default role."""


class IAuditLogRepository(Protocol):
    """Protocol for the append-only audit collection."""

    async def append(self, entry: AuditEntryCreate) -> AuditEntry:
        """Append one entry; the store assigns id and write timestamp."""

    async def list_recent(self, limit: int = 50) -> list[AuditEntry]:
        """Return the most recent entries, newest first."""

    async def list_for_document(
        self, collection: str, document_id: str, limit: int = 100
    ) -> list[AuditEntry]:
        """Return entries for one document, newest first."""
