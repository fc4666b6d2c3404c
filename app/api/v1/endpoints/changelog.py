"""Changelog API: recent audit entries across collections (admin only)."""

from typing import Annotated

from fastapi import APIRouter, Query

from app.api.v1.dependencies import AuditLog, CurrentIdentity, Evaluator
from app.application.services.audit_log import filter_entries
from app.domain.enums import AuditAction
from app.schemas.audit_log import AuditEntryListResponse, AuditEntryResponse

router = APIRouter()


@router.get("", response_model=AuditEntryListResponse)
async def list_changelog(
    identity: CurrentIdentity,
    evaluator: Evaluator,
    audit_log: AuditLog,
    collection: str | None = None,
    user_email: str | None = None,
    action: AuditAction | None = None,
    search: str = "",
    ascending: bool = False,
    limit: Annotated[int | None, Query(ge=1, le=1000)] = None,
) -> AuditEntryListResponse:
    """Most recent entries, filtered the way the changelog view filters them."""
    await evaluator.require_admin(identity.user_id, "view_changelog")
    entries = filter_entries(
        await audit_log.recent(limit),
        collection=collection,
        user_email=user_email,
        action=action,
        search=search,
        ascending=ascending,
    )
    return AuditEntryListResponse(
        items=[AuditEntryResponse.from_entry(e) for e in entries], total=len(entries)
    )
