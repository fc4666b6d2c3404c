"""Analytics use case: document counts per administered collection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.application.dtos.analytics import CollectionStats, CollectionStatsSummary
from app.domain.enums import Capability

if TYPE_CHECKING:
    from app.application.interfaces.repositories import (
        IDocumentStore,
        ISchemaRepository,
    )
    from app.application.services.permission_evaluator import PermissionEvaluator


class GetCollectionStatsUseCase:
    """Count the documents of every collection that has a schema."""

    def __init__(
        self,
        schema_repo: "ISchemaRepository",
        store: "IDocumentStore",
        evaluator: "PermissionEvaluator",
    ) -> None:
        self.schema_repo = schema_repo
        self.store = store
        self.evaluator = evaluator

    async def get_collection_stats(self, user_id: str) -> CollectionStatsSummary:
        """Return counts in schema-registry order. Requires canView."""
        await self.evaluator.require(user_id, Capability.VIEW, "collection_stats")
        stats = []
        for name in await self.schema_repo.list_collections():
            documents = await self.store.list_documents(name)
            stats.append(CollectionStats(name=name, count=len(documents)))
        return CollectionStatsSummary(collections=tuple(stats))
