"""Collection use cases: cached collection engine and mutation coordinator."""

from app.application.use_cases.collections.collection_engine import CollectionEngine
from app.application.use_cases.collections.mutation_coordinator import (
    MutationCoordinator,
)

__all__ = ["CollectionEngine", "MutationCoordinator"]
