"""Audit log service: append-only changelog plus the changelog view filter.

Appends never raise into the caller's write path: a failed append becomes an
AuditWriteException that the mutation coordinator reports as a warning.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from app.application.dtos.audit_log import AuditEntryCreate
from app.application.dtos.identity import Identity
from app.application.interfaces.repositories import IAuditLogRepository
from app.domain.entities.audit import AuditEntry
from app.domain.enums import AuditAction
from app.domain.exceptions import AuditWriteException, DocAdminException
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CHANGELOG_LIMIT = 50


class AuditLogService:
    """Writes and reads audit entries through an IAuditLogRepository."""

    def __init__(
        self,
        repository: IAuditLogRepository,
        default_limit: int = DEFAULT_CHANGELOG_LIMIT,
    ) -> None:
        self._repository = repository
        self._default_limit = default_limit

    async def append(
        self,
        identity: Identity,
        action: AuditAction,
        collection: str,
        document_id: str,
        before: dict[str, Any] | None = None,
        after: dict[str, Any] | None = None,
    ) -> AuditEntry:
        """Append one entry. Any store failure is raised as AuditWriteException."""
        entry = AuditEntryCreate(
            user_id=identity.user_id,
            user_email=identity.email,
            action=action,
            collection=collection,
            document_id=document_id,
            before=dict(before or {}),
            after=dict(after or {}),
        )
        try:
            created = await self._repository.append(entry)
        except DocAdminException as e:
            logger.exception(
                "Audit append failed for %s/%s (%s): %s",
                collection,
                document_id,
                action.value,
                e.message,
            )
            raise AuditWriteException(collection, document_id, e.message) from e
        logger.debug(
            "Audit %s recorded for %s/%s", action.value, collection, document_id
        )
        return created

    async def recent(self, limit: int | None = None) -> list[AuditEntry]:
        """Most recent entries across all collections, newest first."""
        return await self._repository.list_recent(limit or self._default_limit)

    async def document_history(
        self, collection: str, document_id: str, limit: int = 100
    ) -> list[AuditEntry]:
        """Entries for one document, newest first."""
        return await self._repository.list_for_document(
            collection, document_id, limit
        )


def _changes_text(entry: AuditEntry) -> str:
    return json.dumps(entry.changes.to_dict(), default=str, sort_keys=True)


def filter_entries(
    entries: Iterable[AuditEntry],
    collection: str | None = None,
    user_email: str | None = None,
    action: AuditAction | None = None,
    search: str = "",
    ascending: bool = False,
) -> list[AuditEntry]:
    """Filter and order entries the way the changelog view does.

    ``search`` is case-insensitive and matches the collection, document id,
    user email or the serialized changes. Results are ordered by timestamp,
    newest first unless ``ascending``.
    """
    needle = search.strip().lower()
    out: list[AuditEntry] = []
    for entry in entries:
        if collection and entry.collection != collection:
            continue
        if user_email and entry.user_email != user_email:
            continue
        if action is not None and entry.action is not action:
            continue
        if needle:
            haystack = (
                entry.collection,
                entry.document_id,
                entry.user_email,
                _changes_text(entry),
            )
            if not any(needle in part.lower() for part in haystack):
                continue
        out.append(entry)
    out.sort(key=lambda e: e.timestamp, reverse=not ascending)
    return out
