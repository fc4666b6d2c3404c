"""Firestore-backed audit log repository (implements IAuditLogRepository)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from app.application.dtos.audit_log import AuditEntryCreate
from app.domain.entities.audit import AuditChanges, AuditEntry
from app.domain.enums import AuditAction
from app.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    transform_timestamp,
)
from app.infrastructure.firebase.collections import (
    COLLECTION_CHANGELOG,
    FIELD_AUDIT_TIMESTAMP,
)
from app.shared.utils.datetime import ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid


def _entry_document(entry: AuditEntryCreate) -> dict[str, Any]:
    return {
        "userId": entry.user_id,
        "userEmail": entry.user_email,
        "action": entry.action.value,
        "collection": entry.collection,
        "documentId": entry.document_id,
        "changes": {"before": dict(entry.before), "after": dict(entry.after)},
    }


def entry_from_document(doc_id: str, data: dict[str, Any]) -> AuditEntry:
    """Map a stored changelog document to an AuditEntry."""
    changes = data.get("changes") or {}
    timestamp = data.get(FIELD_AUDIT_TIMESTAMP)
    return AuditEntry(
        id=doc_id,
        timestamp=ensure_utc(timestamp) if isinstance(timestamp, datetime) else utc_now(),
        user_id=data.get("userId", ""),
        user_email=data.get("userEmail", ""),
        action=AuditAction(data.get("action", AuditAction.UPDATE.value)),
        collection=data.get("collection", ""),
        document_id=data.get("documentId", ""),
        changes=AuditChanges(
            before=changes.get("before") or {}, after=changes.get("after") or {}
        ),
    )


class FirestoreAuditLogRepository:
    """Append-only changelog; the write timestamp is set by the server."""

    def __init__(
        self, client: FirestoreRESTClient, path: str = COLLECTION_CHANGELOG
    ) -> None:
        self._client = client
        self._coll = client.collection(path)

    async def append(self, entry: AuditEntryCreate) -> AuditEntry:
        entry_id = generate_cuid()
        data = _entry_document(entry)
        batch = self._client.batch()
        batch.set(
            self._coll.document(entry_id),
            data,
            server_timestamps=(FIELD_AUDIT_TIMESTAMP,),
        )
        results = await batch.commit()
        timestamp = transform_timestamp(results[0]) if results else None
        return entry_from_document(
            entry_id, {**data, FIELD_AUDIT_TIMESTAMP: timestamp or utc_now()}
        )

    async def list_recent(self, limit: int = 50) -> list[AuditEntry]:
        query = self._coll.order_by(FIELD_AUDIT_TIMESTAMP, "desc").limit(limit)
        return [entry_from_document(doc.id, doc.to_dict()) async for doc in query.stream()]

    async def list_for_document(
        self, collection: str, document_id: str, limit: int = 100
    ) -> list[AuditEntry]:
        # Requires a composite index on (collection, documentId, timestamp desc).
        query = (
            self._coll.where("collection", "==", collection)
            .where("documentId", "==", document_id)
            .order_by(FIELD_AUDIT_TIMESTAMP, "desc")
            .limit(limit)
        )
        return [entry_from_document(doc.id, doc.to_dict()) async for doc in query.stream()]
