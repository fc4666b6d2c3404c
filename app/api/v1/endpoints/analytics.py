"""Analytics API: document counts per collection."""

from fastapi import APIRouter

from app.api.v1.dependencies import CollectionStatsUseCase, CurrentIdentity
from app.schemas.analytics import CollectionStatsResponse

router = APIRouter()


@router.get("/collections", response_model=CollectionStatsResponse)
async def collection_stats(
    identity: CurrentIdentity, use_case: CollectionStatsUseCase
) -> CollectionStatsResponse:
    """Document count of every collection with a schema (requires canView)."""
    summary = await use_case.get_collection_stats(identity.user_id)
    return CollectionStatsResponse.from_summary(summary)
