"""Request/response schemas for the changelog API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.domain.entities.audit import AuditEntry


class AuditEntryResponse(BaseModel):
    """Single audit entry (read)."""

    id: str
    timestamp: datetime
    user_id: str
    user_email: str
    action: str
    collection: str
    document_id: str
    before: dict[str, Any] = Field(default_factory=dict)
    after: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_entry(cls, entry: AuditEntry) -> "AuditEntryResponse":
        return cls(
            id=entry.id,
            timestamp=entry.timestamp,
            user_id=entry.user_id,
            user_email=entry.user_email,
            action=entry.action.value,
            collection=entry.collection,
            document_id=entry.document_id,
            before=dict(entry.changes.before),
            after=dict(entry.changes.after),
        )


class AuditEntryListResponse(BaseModel):
    """List of audit entries in display order."""

    items: list[AuditEntryResponse]
    total: int
