"""DTOs for mutation results (single, bulk, CSV import)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from app.application.dtos.validation import FieldError
from app.domain.entities.audit import AuditEntry
from app.domain.exceptions import DocAdminException
from app.shared.enums import MutationState


@dataclass(frozen=True)
class RowSkipped:
    """A CSV row that was counted as failed and not written."""

    line: int
    reason: str
    errors: tuple[FieldError, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "reason": self.reason,
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass
class MutationResult:
    """Outcome of one user-initiated mutation.

    ``stages`` records every state the coordinator entered, ending in
    committed or rejected. ``warnings`` carries non-fatal failures (audit
    appends) of a committed mutation.
    """

    action: str
    collection: str
    state: MutationState = MutationState.IDLE
    stages: list[MutationState] = field(default_factory=lambda: [MutationState.IDLE])
    document_ids: list[str] = field(default_factory=list)
    audit_entries: list[AuditEntry] = field(default_factory=list)
    field_errors: list[FieldError] = field(default_factory=list)
    error: DocAdminException | None = None
    warnings: list[DocAdminException] = field(default_factory=list)
    skipped_rows: list[RowSkipped] = field(default_factory=list)

    def enter(self, state: MutationState) -> None:
        self.state = state
        self.stages.append(state)

    @property
    def committed(self) -> bool:
        return self.state is MutationState.COMMITTED

    @property
    def succeeded_count(self) -> int:
        return len(self.document_ids)

    @property
    def failed_count(self) -> int:
        return len(self.skipped_rows)

    def raise_for_error(self) -> None:
        """Re-raise the rejection, if any, for callers that prefer exceptions."""
        if self.error is not None:
            raise self.error

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "collection": self.collection,
            "state": self.state.value,
            "document_ids": list(self.document_ids),
            "audit_entry_ids": [e.id for e in self.audit_entries],
            "succeeded": self.succeeded_count,
            "failed": self.failed_count,
            "skipped_rows": [r.to_dict() for r in self.skipped_rows],
            "warnings": [w.to_dict() for w in self.warnings],
        }
