"""Application DTOs (no store dependency)."""

from app.application.dtos.analytics import CollectionStats, CollectionStatsSummary
from app.application.dtos.audit_log import AuditEntryCreate
from app.application.dtos.batch import BatchOperation, BatchOpKind
from app.application.dtos.identity import Identity
from app.application.dtos.mutation import MutationResult, RowSkipped
from app.application.dtos.query import Page, QueryParams, SortState
from app.application.dtos.validation import FieldError, ValidationResult

__all__ = [
    "AuditEntryCreate",
    "BatchOpKind",
    "BatchOperation",
    "CollectionStats",
    "CollectionStatsSummary",
    "FieldError",
    "Identity",
    "MutationResult",
    "Page",
    "QueryParams",
    "RowSkipped",
    "SortState",
    "ValidationResult",
]
