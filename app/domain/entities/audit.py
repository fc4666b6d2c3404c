"""AuditEntry domain entity: immutable record of one document mutation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.domain.enums import AuditAction


@dataclass(frozen=True)
class AuditChanges:
    """Before/after snapshots of one mutation.

    ``before`` is empty for create; ``after`` holds only ``{"id": ...}`` for delete.
    """

    before: dict[str, Any] = field(default_factory=dict)
    after: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"before": dict(self.before), "after": dict(self.after)}


@dataclass(frozen=True)
class AuditEntry:
    """One appended audit record. Never mutated or deleted after creation.

    ``timestamp`` is the store's write time, not a client-supplied value.
    """

    id: str
    timestamp: datetime
    user_id: str
    user_email: str
    action: AuditAction
    collection: str
    document_id: str
    changes: AuditChanges

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "userId": self.user_id,
            "userEmail": self.user_email,
            "action": self.action.value,
            "collection": self.collection,
            "documentId": self.document_id,
            "changes": self.changes.to_dict(),
        }
