"""Analytics API schemas."""

from pydantic import BaseModel, Field

from app.application.dtos.analytics import CollectionStatsSummary


class CollectionCount(BaseModel):
    name: str
    count: int = Field(..., ge=0)


class CollectionStatsResponse(BaseModel):
    """Per-collection document counts for the analytics dashboard."""

    collections: list[CollectionCount]
    total_documents: int

    @classmethod
    def from_summary(cls, summary: CollectionStatsSummary) -> "CollectionStatsResponse":
        return cls(
            collections=[CollectionCount(name=c.name, count=c.count) for c in summary.collections],
            total_documents=summary.total_documents,
        )
