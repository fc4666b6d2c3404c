"""DTOs for the audit trail (append-only changelog)."""

from dataclasses import dataclass, field
from typing import Any

from app.domain.enums import AuditAction


@dataclass(frozen=True)
class AuditEntryCreate:
    """Input for appending one audit record. Id and timestamp are assigned on write."""

    user_id: str
    user_email: str
    action: AuditAction
    collection: str
    document_id: str
    before: dict[str, Any] = field(default_factory=dict)
    after: dict[str, Any] = field(default_factory=dict)
