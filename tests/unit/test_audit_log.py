"""AuditLogService and changelog filter tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from app.application.dtos.identity import Identity
from app.application.services.audit_log import AuditLogService, filter_entries
from app.domain.entities.audit import AuditChanges, AuditEntry
from app.domain.enums import AuditAction
from app.domain.exceptions import AuditWriteException, StoreException

IDENTITY = Identity("u1", "u1@example.com")
T0 = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def _entry(
    entry_id: str,
    minutes: int,
    action: AuditAction = AuditAction.UPDATE,
    collection: str = "products",
    email: str = "a@example.com",
    after: dict | None = None,
) -> AuditEntry:
    return AuditEntry(
        id=entry_id,
        timestamp=T0 + timedelta(minutes=minutes),
        user_id="u",
        user_email=email,
        action=action,
        collection=collection,
        document_id=f"doc-{entry_id}",
        changes=AuditChanges(before={}, after=after or {}),
    )


ENTRIES = [
    _entry("1", 0, AuditAction.CREATE, after={"name": "Anvil"}),
    _entry("2", 5, AuditAction.UPDATE, collection="orders", email="b@example.com"),
    _entry("3", 10, AuditAction.DELETE, after={"id": "doc-3"}),
]


async def test_append_records_identity_and_changes(audit_log: AuditLogService) -> None:
    entry = await audit_log.append(
        IDENTITY, AuditAction.UPDATE, "products", "p1", {"price": 10}, {"price": 20}
    )
    assert entry.user_id == "u1"
    assert entry.user_email == "u1@example.com"
    assert entry.changes.before == {"price": 10}
    assert entry.changes.after == {"price": 20}
    assert entry.timestamp.tzinfo is not None
    assert [e.id for e in await audit_log.document_history("products", "p1")] == [entry.id]


async def test_append_failure_becomes_audit_write_exception() -> None:
    repo = AsyncMock()
    repo.append = AsyncMock(side_effect=StoreException("quota exceeded", 429))
    service = AuditLogService(repo)
    with pytest.raises(AuditWriteException) as exc_info:
        await service.append(IDENTITY, AuditAction.CREATE, "products", "p9")
    assert exc_info.value.error_code == "AUDIT_WRITE_ERROR"
    assert exc_info.value.details == {"collection": "products", "document_id": "p9"}


async def test_recent_uses_default_limit() -> None:
    repo = AsyncMock()
    repo.list_recent = AsyncMock(return_value=[])
    await AuditLogService(repo, default_limit=7).recent()
    repo.list_recent.assert_awaited_once_with(7)


async def test_recent_newest_first(audit_log: AuditLogService) -> None:
    for doc in ("a", "b", "c"):
        await audit_log.append(IDENTITY, AuditAction.CREATE, "products", doc)
    assert [e.document_id for e in await audit_log.recent(2)] == ["c", "b"]


def test_filter_newest_first_by_default() -> None:
    assert [e.id for e in filter_entries(ENTRIES)] == ["3", "2", "1"]
    assert [e.id for e in filter_entries(ENTRIES, ascending=True)] == ["1", "2", "3"]


def test_filter_by_collection_user_and_action() -> None:
    assert [e.id for e in filter_entries(ENTRIES, collection="orders")] == ["2"]
    assert [e.id for e in filter_entries(ENTRIES, user_email="a@example.com")] == ["3", "1"]
    assert [e.id for e in filter_entries(ENTRIES, action=AuditAction.DELETE)] == ["3"]


def test_filter_search_matches_changes_and_ids() -> None:
    assert [e.id for e in filter_entries(ENTRIES, search="ANVIL")] == ["1"]
    assert [e.id for e in filter_entries(ENTRIES, search="doc-2")] == ["2"]
    assert filter_entries(ENTRIES, search="nothing-like-this") == []
