"""DTOs for collection analytics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CollectionStats:
    """Document count of one administered collection."""

    name: str
    count: int


@dataclass(frozen=True)
class CollectionStatsSummary:
    collections: tuple[CollectionStats, ...]

    @property
    def total_documents(self) -> int:
        return sum(c.count for c in self.collections)
