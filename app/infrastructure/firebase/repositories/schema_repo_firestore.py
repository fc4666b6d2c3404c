"""Firestore-backed schema repository (implements ISchemaRepository)."""

from __future__ import annotations

from typing import Any

from app.domain.entities.schema import USERS_COLLECTION
from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.infrastructure.firebase.collections import (
    COLLECTION_SCHEMAS,
    FIELD_SCHEMA_FIELDS,
)


class FirestoreSchemaRepository:
    """Reads schema documents written by the schema registry."""

    def __init__(
        self, client: FirestoreRESTClient, path: str = COLLECTION_SCHEMAS
    ) -> None:
        self._coll = client.collection(path)

    async def get_fields(self, collection: str) -> list[Any] | None:
        """Return the stored ``fields`` array, or None if there is no schema document."""
        doc = await self._coll.document(collection).get()
        if doc is None:
            return None
        return doc.to_dict().get(FIELD_SCHEMA_FIELDS) or []

    async def list_collections(self) -> list[str]:
        """Schema document ids; the built-in users collection is always first."""
        names = [doc.id async for doc in self._coll.stream()]
        if USERS_COLLECTION not in names:
            names.insert(0, USERS_COLLECTION)
        return names
