"""Collection document and cached snapshot entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class CollectionDocument:
    """One stored document: immutable store-assigned id plus field values.

    Keys outside the active schema are kept as-is; they are neither
    rendered nor validated.
    """

    id: str
    data: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.data.get(name, default)

    def as_dict(self) -> dict[str, Any]:
        """Return field values with the id merged in (audit/export shape)."""
        return {**self.data, "id": self.id}


@dataclass(frozen=True)
class CollectionSnapshot:
    """Full document set of one collection as last fetched.

    ``generation`` is the request tag of the fetch that produced it.
    """

    collection: str
    documents: tuple[CollectionDocument, ...]
    generation: int
    fetched_at: datetime

    def get(self, document_id: str) -> CollectionDocument | None:
        for document in self.documents:
            if document.id == document_id:
                return document
        return None

    def __len__(self) -> int:
        return len(self.documents)
