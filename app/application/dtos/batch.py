"""DTOs for batched (atomic, multi-document) writes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class BatchOpKind(str, Enum):
    """Kind of one write inside a batch."""

    SET = "set"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class BatchOperation:
    """One write of a batch.

    SET replaces the whole document (creating it when missing); UPDATE
    writes only the given fields of an existing document; DELETE removes it.
    """

    kind: BatchOpKind
    document_id: str
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def set(cls, document_id: str, data: dict[str, Any]) -> "BatchOperation":
        return cls(BatchOpKind.SET, document_id, dict(data))

    @classmethod
    def update(cls, document_id: str, data: dict[str, Any]) -> "BatchOperation":
        return cls(BatchOpKind.UPDATE, document_id, dict(data))

    @classmethod
    def delete(cls, document_id: str) -> "BatchOperation":
        return cls(BatchOpKind.DELETE, document_id)
