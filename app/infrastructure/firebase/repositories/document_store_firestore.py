"""Firestore-backed document store (implements IDocumentStore)."""

from __future__ import annotations

from app.application.dtos.batch import BatchOperation, BatchOpKind
from app.domain.entities.document import CollectionDocument
from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.shared.telemetry.logging import get_logger
from app.shared.utils.generators import generate_cuid

logger = get_logger(__name__)


class FirestoreDocumentStore:
    """Administered collections addressed by (collection, id)."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client

    async def list_documents(self, collection: str) -> list[CollectionDocument]:
        """Return every document of the collection (all pages)."""
        return [
            CollectionDocument(id=snapshot.id, data=snapshot.to_dict())
            async for snapshot in self._client.collection(collection).stream()
        ]

    async def get_document(
        self, collection: str, document_id: str
    ) -> CollectionDocument | None:
        snapshot = await self._client.collection(collection).document(document_id).get()
        if snapshot is None:
            return None
        return CollectionDocument(id=snapshot.id, data=snapshot.to_dict())

    def new_document_id(self, collection: str) -> str:
        return generate_cuid()

    async def commit(self, collection: str, operations: list[BatchOperation]) -> None:
        """Commit all operations in one atomic batch."""
        coll = self._client.collection(collection)
        batch = self._client.batch()
        for op in operations:
            ref = coll.document(op.document_id)
            match op.kind:
                case BatchOpKind.SET:
                    batch.set(ref, op.data)
                case BatchOpKind.UPDATE:
                    batch.update(ref, op.data)
                case BatchOpKind.DELETE:
                    batch.delete(ref)
        await batch.commit()
        logger.debug("Committed %d writes to %s", len(operations), collection)
