"""Process-local store backend: same contracts as the Firestore repositories.

Used for development without credentials and by the test suite. All state
lives in one ``MemoryDatabase`` so the repositories see each other's writes.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from app.application.dtos.audit_log import AuditEntryCreate
from app.application.dtos.batch import BatchOperation, BatchOpKind
from app.domain.entities.audit import AuditChanges, AuditEntry
from app.domain.entities.document import CollectionDocument
from app.domain.entities.schema import USERS_COLLECTION
from app.domain.exceptions import StoreException
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid


@dataclass
class MemoryDatabase:
    """All in-process state: documents by collection, schemas, roles, config."""

    documents: dict[str, dict[str, dict[str, Any]]] = field(default_factory=dict)
    schemas: dict[str, list[Any]] = field(default_factory=dict)
    roles: dict[str, dict[str, Any]] = field(default_factory=dict)
    default_role: str | None = None
    app_title: str | None = None
    audit: list[AuditEntry] = field(default_factory=list)

    def collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self.documents.setdefault(name, {})


class InMemoryDocumentStore:
    """IDocumentStore over a MemoryDatabase. Batches are all-or-nothing."""

    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    async def list_documents(self, collection: str) -> list[CollectionDocument]:
        return [
            CollectionDocument(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self._db.collection(collection).items()
        ]

    async def get_document(
        self, collection: str, document_id: str
    ) -> CollectionDocument | None:
        data = self._db.collection(collection).get(document_id)
        if data is None:
            return None
        return CollectionDocument(id=document_id, data=copy.deepcopy(data))

    def new_document_id(self, collection: str) -> str:
        return generate_cuid()

    async def commit(self, collection: str, operations: list[BatchOperation]) -> None:
        docs = self._db.collection(collection)
        staged = copy.deepcopy(docs)
        for op in operations:
            match op.kind:
                case BatchOpKind.SET:
                    staged[op.document_id] = copy.deepcopy(op.data)
                case BatchOpKind.UPDATE:
                    if op.document_id not in staged:
                        raise StoreException(
                            f"No document to update: {collection}/{op.document_id}",
                            status_code=404,
                        )
                    staged[op.document_id].update(copy.deepcopy(op.data))
                case BatchOpKind.DELETE:
                    staged.pop(op.document_id, None)
        docs.clear()
        docs.update(staged)


class InMemorySchemaRepository:
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    async def get_fields(self, collection: str) -> list[Any] | None:
        fields = self._db.schemas.get(collection)
        return copy.deepcopy(fields) if fields is not None else None

    async def list_collections(self) -> list[str]:
        names = list(self._db.schemas)
        if USERS_COLLECTION not in names:
            names.insert(0, USERS_COLLECTION)
        return names


class InMemoryRoleRepository:
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    async def get_role(self, name: str) -> dict[str, Any] | None:
        data = self._db.roles.get(name)
        return copy.deepcopy(data) if data is not None else None

    async def list_roles(self) -> dict[str, dict[str, Any]]:
        return copy.deepcopy(self._db.roles)

    async def save_role(self, name: str, data: dict[str, Any]) -> None:
        self._db.roles[name] = copy.deepcopy(data)

    async def delete_role(self, name: str) -> None:
        self._db.roles.pop(name, None)


class InMemoryAccessConfigRepository:
    """Role assignments are read from the ``users`` collection's ``role`` field."""

    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    async def get_user_role(self, user_id: str) -> str | None:
        user = self._db.collection(USERS_COLLECTION).get(user_id) or {}
        role = user.get("role")
        return role if isinstance(role, str) and role else None

    async def get_default_role(self) -> str | None:
        return self._db.default_role

    async def set_default_role(self, role: str) -> None:
        self._db.default_role = role

    async def get_app_title(self) -> str | None:
        return self._db.app_title

    async def set_app_title(self, title: str) -> None:
        self._db.app_title = title


class InMemoryAuditLogRepository:
    def __init__(self, db: MemoryDatabase) -> None:
        self._db = db

    async def append(self, entry: AuditEntryCreate) -> AuditEntry:
        created = AuditEntry(
            id=generate_cuid(),
            timestamp=utc_now(),
            user_id=entry.user_id,
            user_email=entry.user_email,
            action=entry.action,
            collection=entry.collection,
            document_id=entry.document_id,
            changes=AuditChanges(
                before=copy.deepcopy(entry.before), after=copy.deepcopy(entry.after)
            ),
        )
        self._db.audit.append(created)
        return created

    async def list_recent(self, limit: int = 50) -> list[AuditEntry]:
        return list(reversed(self._db.audit))[:limit]

    async def list_for_document(
        self, collection: str, document_id: str, limit: int = 100
    ) -> list[AuditEntry]:
        matching = [
            e
            for e in reversed(self._db.audit)
            if e.collection == collection and e.document_id == document_id
        ]
        return matching[:limit]
