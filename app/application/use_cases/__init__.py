"""Application use cases: one entry point per workflow."""

from app.application.use_cases.analytics import GetCollectionStatsUseCase
from app.application.use_cases.collections import (
    CollectionEngine,
    MutationCoordinator,
)

__all__ = ["CollectionEngine", "GetCollectionStatsUseCase", "MutationCoordinator"]
